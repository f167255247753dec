# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Exceptions raised by the investment calculators."""


class InvalidArgumentError(ValueError):
    """Raised when a calculation is given input it cannot work with."""
