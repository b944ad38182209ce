"""Summary: Deterministic keystream (pad) derivation strategies.

Importance: Both parties must compute byte-identical pads from the same secret and counter.
Alternatives: Use a standard stream cipher such as ChaCha20 keyed by the secret.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from entangle.config import AppConfig
from entangle.counter import check_counter
from entangle.errors import PadError, PadErrorKind

SECRET_SIZE = 32
MIN_PAD_LENGTH = 1
MAX_PAD_LENGTH = 1024
ARITHMETIC_STEP = 7

TWIN_INPUT_WIDTH = SECRET_SIZE + 1
TWIN_HIDDEN_WIDTH = 64
TWIN_OUTPUT_WIDTH = 32
# Counter input is damped so one step moves any output byte by at most 1 and a
# wrap (255 -> 0) by at most 64, both below the additive counter step.
TWIN_COUNTER_SCALE = 255 * 128
TWIN_COUNTER_STEP = 101


class KeystreamGenerator(ABC):
    """Summary: Abstract pure mapping from (secret, counter, length) to pad bytes.

    Importance: Lets sessions swap derivation strategies without touching the cipher.
    Alternatives: Hard-code a single derivation function.
    """

    name: str = ""

    def derive(self, secret: bytes, counter: int, length: int) -> bytes:
        """Summary: Validate inputs and derive a pad of the requested length.

        Importance: Enforces the shared contract before any strategy runs.
        Alternatives: Let each strategy validate its own inputs.
        """

        if len(secret) != SECRET_SIZE:
            raise ValueError(f"Secret must be {SECRET_SIZE} bytes, got {len(secret)}")
        check_counter(counter)
        if not MIN_PAD_LENGTH <= length <= MAX_PAD_LENGTH:
            raise PadError(
                PadErrorKind.LENGTH_OUT_OF_RANGE,
                f"Pad length must be between {MIN_PAD_LENGTH} and {MAX_PAD_LENGTH}, got {length}",
            )
        return self._derive(bytes(secret), counter, length)

    @abstractmethod
    def _derive(self, secret: bytes, counter: int, length: int) -> bytes:
        """Summary: Produce pad bytes from already validated inputs."""


class ArithmeticKeystream(KeystreamGenerator):
    """Summary: pad[i] = (secret[i mod 32] + counter + i * K) mod 256.

    Importance: Trivial to reproduce on any platform.
    Alternatives: Use the matrix-transform strategy.
    """

    name = "arithmetic"

    def __init__(self, step: int = ARITHMETIC_STEP) -> None:
        self._step = step

    def _derive(self, secret: bytes, counter: int, length: int) -> bytes:
        return bytes(
            (secret[i % SECRET_SIZE] + counter + i * self._step) % 256 for i in range(length)
        )


class TwinKeystream(KeystreamGenerator):
    """Summary: Two fixed affine transforms with ReLU and tanh, rescaled to bytes.

    Importance: Mirrors the "twin" generator both parties run from identical tables.
    Alternatives: Use the arithmetic strategy.

    Each byte is shifted by counter * 101 mod 256, so adjacent counters differ in
    every byte and no two counters share an offset.

    The coefficient tables are computed once here from closed-form formulas, never
    from a random source, so every instance holds identical values.
    """

    name = "twin"

    def __init__(self) -> None:
        self._layer1_weights = generate_weights(TWIN_INPUT_WIDTH, TWIN_HIDDEN_WIDTH)
        self._layer1_bias = generate_bias(TWIN_HIDDEN_WIDTH)
        self._layer2_weights = generate_weights(TWIN_HIDDEN_WIDTH, TWIN_OUTPUT_WIDTH)
        self._layer2_bias = generate_bias(TWIN_OUTPUT_WIDTH)

    def transform(self, vector: list[int]) -> list[float]:
        """Summary: Run the two-layer forward pass over a 33-element input.

        Importance: Exposes the bounded output for inspection and tests.
        Alternatives: Keep the pass private to pad derivation.
        """

        if not validate_twin_input(vector):
            raise ValueError(f"Twin input must be {TWIN_INPUT_WIDTH} values in [0, 255]")
        scaled = [value / 255 for value in vector[:SECRET_SIZE]]
        scaled.append(vector[SECRET_SIZE] / TWIN_COUNTER_SCALE)
        hidden = [max(0.0, value) for value in _affine(scaled, self._layer1_weights, self._layer1_bias)]
        return [math.tanh(value) for value in _affine(hidden, self._layer2_weights, self._layer2_bias)]

    def _derive(self, secret: bytes, counter: int, length: int) -> bytes:
        offset = counter * TWIN_COUNTER_STEP
        output = [_to_byte(value) for value in self.transform(list(secret) + [counter])]
        return bytes((output[i % TWIN_OUTPUT_WIDTH] + offset) % 256 for i in range(length))


@dataclass(frozen=True)
class KeystreamFactory:
    """Summary: Factory for selecting the keystream strategy from configuration.

    Importance: Keeps strategy selection in one place so both parties agree.
    Alternatives: Wire a strategy manually at each entrypoint.
    """

    config: AppConfig

    def build(self) -> KeystreamGenerator:
        if self.config.keystream_strategy == ArithmeticKeystream.name:
            return ArithmeticKeystream()
        if self.config.keystream_strategy == TwinKeystream.name:
            return TwinKeystream()
        raise ValueError(f"Unknown keystream strategy: {self.config.keystream_strategy}")


def generate_weights(rows: int, cols: int) -> tuple[tuple[float, ...], ...]:
    """Summary: Build a weight table from w[i][j] = (sin(s*0.1) + cos(s*0.05)) / 2.

    Importance: s = (i*137 + j*149) mod 256 gives both parties the same matrix.
    Alternatives: Ship the table as a data file.
    """

    return tuple(
        tuple(
            (math.sin(((i * 137 + j * 149) % 256) * 0.1) + math.cos(((i * 137 + j * 149) % 256) * 0.05))
            * 0.5
            for j in range(cols)
        )
        for i in range(rows)
    )


def generate_bias(size: int) -> tuple[float, ...]:
    return tuple(math.sin(i * 0.2) * 0.3 for i in range(size))


def validate_twin_input(vector: list[int]) -> bool:
    """Summary: Check a twin input vector has 33 byte-range elements.

    Importance: Rejects malformed vectors before the forward pass.
    Alternatives: Clamp out-of-range values silently.
    """

    return len(vector) == TWIN_INPUT_WIDTH and all(0 <= value <= 255 for value in vector)


def _affine(
    vector: list[float],
    weights: tuple[tuple[float, ...], ...],
    bias: tuple[float, ...],
) -> list[float]:
    # Accumulate in row order; reordering changes the float result.
    output = [0.0] * len(bias)
    for i, row in enumerate(weights):
        value = vector[i]
        for j, weight in enumerate(row):
            output[j] += value * weight
    return [total + offset for total, offset in zip(output, bias)]


def _to_byte(value: float) -> int:
    return min(255, max(0, math.floor((value + 1) / 2 * 255 + 0.5)))
