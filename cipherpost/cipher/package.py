"""Wire format of an encoded binary package.

    base64( JSON { "encrypted": base64(ciphertext), "indices": [int, ...], "version": 1 } )

``version`` is optional on input and defaults to 1.
"""
from __future__ import annotations

import base64
import json
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

from .permutation import is_permutation

FORMAT_VERSION = 1


class MalformedPackage(ValueError):
    """The package could not be parsed into ciphertext + permutation table."""
    pass


class EncodedPackage(BaseModel):
    """Ciphertext together with the permutation table needed to invert it."""

    model_config = ConfigDict(frozen=True)

    ciphertext: bytes
    permutation: List[StrictInt] = Field(default_factory=list)
    version: StrictInt = Field(default=FORMAT_VERSION)

    @model_validator(mode="after")
    def _check_table(self) -> "EncodedPackage":
        if self.version != FORMAT_VERSION:
            raise ValueError(f"Unsupported package version: {self.version}")
        if not is_permutation(self.permutation, len(self.ciphertext)):
            raise ValueError(
                f"indices must be a permutation of range({len(self.ciphertext)})"
            )
        return self

    def to_wire(self) -> str:
        body = {
            "encrypted": base64.b64encode(self.ciphertext).decode("ascii"),
            "indices": list(self.permutation),
            "version": self.version,
        }
        raw = json.dumps(body, separators=(",", ":")).encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    @classmethod
    def from_wire(cls, package: Union[str, bytes]) -> "EncodedPackage":
        """Parse a wire string. Raises :class:`MalformedPackage` on any failure."""
        try:
            if isinstance(package, str):
                package = package.encode("ascii")
            obj = json.loads(base64.b64decode(package, validate=True).decode("utf-8"))
            if not isinstance(obj, dict) or "encrypted" not in obj:
                raise MalformedPackage("package has no 'encrypted' field")
            if not isinstance(obj["encrypted"], str):
                raise MalformedPackage("'encrypted' must be a base64 string")
            return cls(
                ciphertext=base64.b64decode(obj["encrypted"], validate=True),
                permutation=obj.get("indices", []),
                version=obj.get("version", FORMAT_VERSION),
            )
        except MalformedPackage:
            raise
        except ValueError as e:
            raise MalformedPackage(str(e)) from e
        except RecursionError as e:
            raise MalformedPackage("package JSON is nested too deeply") from e
