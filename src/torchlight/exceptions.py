from __future__ import annotations


class TorchlightError(Exception):
    """Base class for errors raised by the torchlight package."""


class ConfigError(TorchlightError, ValueError):
    """A configuration source could not be read or parsed."""


__all__ = ["TorchlightError", "ConfigError"]
