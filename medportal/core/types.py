"""
Shared wire types.
"""
from typing import Annotated

from pydantic import PlainSerializer

# 64-bit integer internally, string in JSON so clients never lose precision
WireId = Annotated[int, PlainSerializer(lambda value: str(value), return_type=str)]
