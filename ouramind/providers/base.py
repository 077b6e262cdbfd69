from abc import ABC, abstractmethod


class BaseClassifierProvider(ABC):
    """Abstract base class for all emotion-classification providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The name of this provider (e.g. 'watson')."""
        ...

    @abstractmethod
    def analyze(self, text: str, timeout: float) -> dict:
        """
        Score the emotional tone of *text*. Blocking; must give up after *timeout* seconds.

        Args:
            text: Plaintext to classify. Never logged.
            timeout: Seconds to wait for the remote service.

        Returns:
            dict with keys:
                - emotions: dict[str, float] | None — raw per-emotion intensities
                - provider: str                     — provider name
                - status: "success" | "failed"
                - error: str | None                 — error message on failure
        """
        ...
