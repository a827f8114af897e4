"""
Vanity scoring rules.

A rule maps a 40-character lowercase hex address to an integer; higher
is rarer.  The rule is chosen once at startup and handed to every worker,
so rules are stateless and picklable.

``difficulty_base`` is how much larger the search space gets per extra
point of score; the reporter uses it to estimate time to the next
improvement.
"""

from __future__ import annotations


class ScoreRule:
    """Base class for all scoring rules."""

    name: str = ""
    difficulty_base: int = 16

    def score(self, address: str) -> int:
        """Score a lowercase hex address (no ``0x`` prefix)."""
        raise NotImplementedError

    def __call__(self, address: str) -> int:
        return self.score(address)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LeadingZeroBytes(ScoreRule):
    """Consecutive ``"00"`` byte pairs at the start of the address."""

    name = "leading-zero-bytes"
    difficulty_base = 256

    def score(self, address: str) -> int:
        count = 0
        for i in range(0, len(address) - 1, 2):
            if address[i:i + 2] != "00":
                break
            count += 1
        return count


class LeadingZeroNibbles(ScoreRule):
    """Consecutive ``'0'`` hex digits at the start of the address."""

    name = "leading-zero-nibbles"
    difficulty_base = 16

    def score(self, address: str) -> int:
        return len(address) - len(address.lstrip("0"))


class LongestUniformRun(ScoreRule):
    """
    The longer of the leading and trailing runs of one repeated digit.

    ``"00...fffff"`` scores 5: both ends are measured independently and
    the better one wins.
    """

    name = "longest-uniform-run"
    difficulty_base = 16

    def score(self, address: str) -> int:
        if not address:
            return 0
        leading = len(address) - len(address.lstrip(address[0]))
        trailing = len(address) - len(address.rstrip(address[-1]))
        return max(leading, trailing)


class ZeroBytes(ScoreRule):
    """Byte-aligned ``"00"`` pairs anywhere in the address."""

    name = "zero-bytes"
    difficulty_base = 256

    def score(self, address: str) -> int:
        return sum(1 for i in range(0, len(address) - 1, 2)
                   if address[i:i + 2] == "00")


RULES: dict[str, type[ScoreRule]] = {
    rule.name: rule
    for rule in (LeadingZeroBytes, LeadingZeroNibbles, LongestUniformRun, ZeroBytes)
}

DEFAULT_RULE = LeadingZeroBytes.name


def get_rule(name: str) -> ScoreRule:
    """Instantiate the rule registered under *name* (``_`` and ``-`` are interchangeable)."""
    key = name.strip().lower().replace("_", "-")
    try:
        return RULES[key]()
    except KeyError:
        raise ValueError(
            f"Unknown scoring rule {name!r}; choose from {', '.join(sorted(RULES))}"
        ) from None
