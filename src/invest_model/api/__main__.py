"""
Entry point for running the API as a module: python -m invest_model.api
"""
from .app import main

if __name__ == '__main__':
    main()
