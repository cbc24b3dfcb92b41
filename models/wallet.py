from dataclasses import dataclass


@dataclass(frozen=True)
class Wallet:
    id: str
    name: str
