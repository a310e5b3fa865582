"""
Domain models for wireprobe.

Defines the Record exchanged over the wire: three signed 32-bit integers in a
fixed order. The model validates field ranges so a Record can always be
encoded, and exposes the single transformation the server applies to it.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def _wrapping_increment(value: int) -> int:
    """Add one with two's-complement 32-bit wraparound."""
    return (value + 1 - INT32_MIN) % 2**32 + INT32_MIN


class Record(BaseModel):
    """
    The fixed-size record exchanged between client and server.

    Field order is part of the wire format: foo, then bar, then baz.
    """

    foo: int = Field(0, ge=INT32_MIN, le=INT32_MAX, description="First field (wire name Foo).")
    bar: int = Field(0, ge=INT32_MIN, le=INT32_MAX, description="Second field (wire name Bar).")
    baz: int = Field(0, ge=INT32_MIN, le=INT32_MAX, description="Third field (wire name Baz).")

    model_config = {
        "frozen": True,
        "strict": True,
    }

    @classmethod
    def zero(cls) -> "Record":
        """Record used when nothing could be decoded from the connection."""
        return cls(foo=0, bar=0, baz=0)

    def incremented(self) -> "Record":
        """Return a new Record with every field increased by one, wrapping at 32 bits."""
        return Record(
            foo=_wrapping_increment(self.foo),
            bar=_wrapping_increment(self.bar),
            baz=_wrapping_increment(self.baz),
        )

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.foo, self.bar, self.baz)

    def __str__(self) -> str:
        return f"{{Foo: {self.foo}, Bar: {self.bar}, Baz: {self.baz}}}"


__all__ = ["INT32_MAX", "INT32_MIN", "Record"]
