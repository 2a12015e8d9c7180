"""BIP39 mnemonic implementation for cosmwallet."""

from mnemonic import Mnemonic

from ..constants import BIP39_STRENGTHS, BIP39_WORD_COUNTS, DEFAULT_MNEMONIC_STRENGTH
from ..exceptions import MnemonicInvalid
from ..types.common import Seed

__all__ = [
    "generate_mnemonic",
    "normalize_mnemonic",
    "validate_mnemonic",
    "is_valid_mnemonic",
    "mnemonic_to_seed",
]

_ENGLISH = Mnemonic("english")
_WORDS = frozenset(_ENGLISH.wordlist)


def generate_mnemonic(strength: int = DEFAULT_MNEMONIC_STRENGTH) -> str:
    """Generate a BIP39 mnemonic phrase from fresh entropy (24 words by default)."""
    if strength not in BIP39_STRENGTHS:
        raise ValueError("Strength must be 128, 160, 192, 224, or 256")
    return _ENGLISH.generate(strength=strength)


def normalize_mnemonic(mnemonic: str) -> str:
    """NFKD-normalize a phrase and collapse whitespace runs to single spaces."""
    return " ".join(Mnemonic.normalize_string(mnemonic).split())


def validate_mnemonic(mnemonic: str) -> str:
    """
    Validate a phrase against the English wordlist.

    Error messages describe the rule that failed and, for unknown words, the
    word position; the phrase itself is never echoed.

    Args:
        mnemonic: Phrase to validate

    Returns:
        Normalized phrase

    Raises:
        MnemonicInvalid: If word count, wordlist membership or checksum fails
    """
    if not isinstance(mnemonic, str):
        raise MnemonicInvalid(f"Mnemonic must be a string, got {type(mnemonic).__name__}")

    normalized = normalize_mnemonic(mnemonic)
    words = normalized.split(" ") if normalized else []

    if len(words) not in BIP39_WORD_COUNTS:
        raise MnemonicInvalid(
            f"Invalid word count {len(words)}, expected one of {', '.join(map(str, BIP39_WORD_COUNTS))}"
        )
    for position, word in enumerate(words, start=1):
        if word not in _WORDS:
            raise MnemonicInvalid(f"Word {position} is not in the BIP39 English wordlist")
    if not _ENGLISH.check(normalized):
        raise MnemonicInvalid("Mnemonic checksum mismatch")

    return normalized


def is_valid_mnemonic(mnemonic: str) -> bool:
    try:
        validate_mnemonic(mnemonic)
        return True
    except MnemonicInvalid:
        return False


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> Seed:
    """Convert mnemonic to seed using PBKDF2-HMAC-SHA512 (2048 rounds)."""
    normalized = validate_mnemonic(mnemonic)
    return Seed(Mnemonic.to_seed(normalized, passphrase))
