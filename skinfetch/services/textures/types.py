from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TextureProperty:
    """The signed ``textures`` property of a player profile.

    ``value`` is the base64 texture blob and ``signature`` the session
    server's signature over it (absent when requested unsigned).
    """

    name: str
    value: str
    signature: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "value": self.value}
        if self.signature is not None:
            data["signature"] = self.signature
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextureProperty":
        return cls(
            name=data["name"],
            value=data["value"],
            signature=data.get("signature"),
        )
