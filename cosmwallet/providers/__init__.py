"""Provider interface for cosmwallet."""

from ..providers.base import BaseProvider

__all__ = ["BaseProvider"]
