"""
시크릿 -> 지갑 주소 도출
- BIP39 니모닉: bip_utils Bip44 (Solana, m/44'/501'/{account}'/0') 경로로 도출
- base58 개인키: 32바이트 시드 또는 64바이트 (시드 + 공개키)
"""
import base58
from bip_utils import (
    Bip39Languages,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
    Bip44,
    Bip44Changes,
    Bip44Coins,
)
from nacl.signing import SigningKey

from tiercheck.errors import InvalidSecret, InvalidWalletAddress

_mnemonic_validator = Bip39MnemonicValidator(Bip39Languages.ENGLISH)


def _normalize(secret: str) -> str:
    return " ".join(secret.split())


def is_mnemonic(secret: str) -> bool:
    """체크섬까지 검증된 BIP39 영어 니모닉인지"""
    return _mnemonic_validator.IsValid(_normalize(secret))


def public_key_from_seed(seed32: bytes) -> bytes:
    return bytes(SigningKey(seed32).verify_key)


def address_from_mnemonic(phrase: str, passphrase: str = "", account: int = 0) -> str:
    seed = Bip39SeedGenerator(_normalize(phrase), Bip39Languages.ENGLISH).Generate(passphrase)
    wallet = (
        Bip44.FromSeed(seed, Bip44Coins.SOLANA)
        .Purpose()
        .Coin()
        .Account(account)
        .Change(Bip44Changes.CHAIN_EXT)
    )
    return wallet.PublicKey().ToAddress()


def address_from_private_key(encoded: str) -> str:
    try:
        raw = base58.b58decode(encoded)
    except ValueError as e:
        raise InvalidSecret("Invalid seed phrase or private key") from e

    if len(raw) not in (32, 64):
        raise InvalidSecret(
            f"Invalid private key length ({len(raw)} bytes, must be 32 or 64 bytes)"
        )

    public_key = public_key_from_seed(raw[:32])
    if len(raw) == 64 and raw[32:] != public_key:
        raise InvalidSecret("Invalid seed phrase or private key")
    return base58.b58encode(public_key).decode("ascii")


def derive_wallet_address(secret: str) -> str:
    """니모닉 -> base58 개인키 순으로 해석하여 지갑 주소(base58) 반환"""
    if not secret or not secret.strip():
        raise InvalidSecret("Seed phrase or private key is required")

    if is_mnemonic(secret):
        return address_from_mnemonic(secret)
    return address_from_private_key(secret.strip())


def validate_wallet_address(address: str) -> str:
    """base58 디코딩 결과가 32바이트인 Solana 주소만 허용"""
    candidate = (address or "").strip()
    # base58 32바이트 = 32~44자
    if not 32 <= len(candidate) <= 44:
        raise InvalidWalletAddress("Invalid wallet address")
    try:
        decoded = base58.b58decode(candidate)
    except ValueError as e:
        raise InvalidWalletAddress("Invalid wallet address") from e
    if len(decoded) != 32:
        raise InvalidWalletAddress("Invalid wallet address")
    return candidate
