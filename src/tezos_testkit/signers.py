"""Signer models accepted by deploy_contract."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FaucetAccount(BaseModel):
    """A faucet account as downloaded from a testnet faucet.

    The account must be activated on chain once before it can sign.
    """

    mnemonic: List[str]
    secret: str
    amount: str  # mutez
    pkh: str
    password: Optional[str] = None
    email: str
    activation_code: Optional[str] = Field(default=None, alias="activationCode")

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @property
    def passphrase(self) -> str:
        return " ".join(self.mnemonic)


# A direct signer is the raw secret key (edsk..., spsk..., p2sk...)
Signer = Union[FaucetAccount, str]


def signer_identity(signer: Signer) -> str:
    """Stable identity used to decide whether a signer is already active."""
    if isinstance(signer, FaucetAccount):
        return f"faucet:{signer.pkh}"
    return f"key:{signer}"
