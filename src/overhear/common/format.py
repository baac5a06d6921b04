from typing import NamedTuple

from rich.pretty import pretty_repr


class Pretty(NamedTuple):
  value: object

  def __str__(self) -> str:
    return pretty_repr(self.value)


class Seconds(NamedTuple):
  value: float

  def __str__(self) -> str:
    return f"{self.value:.3f}s"
