from sqlbits.utils import logging

__all__ = ("logging",)
