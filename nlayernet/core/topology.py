"""Layer-size descriptors such as ``"2-2-1-3"``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .errors import ConfigurationError

SEPARATOR = "-"
INPUT_LAYER = 0
FIRST_HIDDEN_LAYER = 1


@dataclass(frozen=True)
class Topology:
    """Ordered unit counts of every activation layer, input first.

    The canonical string form (``str(topology)``) doubles as the tag written
    at the start of every weight file.
    """

    layers: tuple[int, ...]

    def __post_init__(self) -> None:
        layers = tuple(self.layers)
        if len(layers) < 2:
            raise ConfigurationError(
                f"A topology needs at least 2 layers, got {len(layers)}"
            )
        for size in layers:
            if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
                raise ConfigurationError(
                    f"Layer sizes must be positive integers, got {size!r}"
                )
        object.__setattr__(self, "layers", layers)

    @classmethod
    def parse(cls, descriptor: str) -> "Topology":
        """Parse ``L0-L1-...-Ln`` into a :class:`Topology`."""

        if not isinstance(descriptor, str) or not descriptor.strip():
            raise ConfigurationError("Topology descriptor is empty")
        sizes: list[int] = []
        for position, token in enumerate(descriptor.strip().split(SEPARATOR)):
            token = token.strip()
            if not token:
                raise ConfigurationError(
                    f"Topology descriptor {descriptor!r} is missing layer {position}"
                )
            try:
                size = int(token)
            except ValueError:
                raise ConfigurationError(
                    f"Layer {position} of {descriptor!r} is not an integer: {token!r}"
                ) from None
            if size <= 0:
                raise ConfigurationError(
                    f"Layer {position} of {descriptor!r} must be positive, got {size}"
                )
            sizes.append(size)
        return cls(tuple(sizes))

    @classmethod
    def from_sizes(cls, sizes: Sequence[int]) -> "Topology":
        return cls(tuple(sizes))

    def __str__(self) -> str:
        return SEPARATOR.join(str(size) for size in self.layers)

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[int]:
        return iter(self.layers)

    def __getitem__(self, index: int) -> int:
        return self.layers[index]

    @property
    def num_layers(self) -> int:
        return len(self.layers)

    @property
    def num_connectivity_layers(self) -> int:
        return len(self.layers) - 1

    @property
    def first_hidden(self) -> int:
        return FIRST_HIDDEN_LAYER

    @property
    def last_hidden(self) -> int:
        return len(self.layers) - 2

    @property
    def output(self) -> int:
        return len(self.layers) - 1

    @property
    def input_size(self) -> int:
        return self.layers[INPUT_LAYER]

    @property
    def output_size(self) -> int:
        return self.layers[-1]

    @property
    def has_hidden_layers(self) -> bool:
        return len(self.layers) > 2

    def weight_shapes(self) -> list[tuple[int, int]]:
        """Return ``(source, destination)`` shapes per connectivity layer."""

        return list(zip(self.layers[:-1], self.layers[1:]))

    def weight_count(self) -> int:
        return int(sum(src * dst for src, dst in self.weight_shapes()))


__all__ = ["FIRST_HIDDEN_LAYER", "INPUT_LAYER", "Topology"]
