"""Server configuration.

Built once at startup and shared read-only by every request.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from dotenv import load_dotenv
from jsonschema import SchemaError

from contract.errors import ConfigurationError
from contract.procedure import Procedure
from contract.schema import SchemaChecker

log = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ServerConfig:
    """``debug`` flag plus the non-empty name -> procedure mapping."""

    procedures: Mapping[str, Procedure] = field(default_factory=dict)
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.procedures or not isinstance(self.procedures, Mapping):
            raise ConfigurationError("no procedures defined")

        checker = SchemaChecker()
        for name, proc in self.procedures.items():
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"procedure name {name!r} is not a non-empty string")
            if not isinstance(proc, Procedure):
                raise ConfigurationError(f"procedure {name!r} does not implement the contract")
            for kind, schema in (("parameters", proc.parameters()), ("result", proc.result())):
                try:
                    checker.check_schema(schema)
                except SchemaError as exc:
                    raise ConfigurationError(
                        f"procedure {name!r} declares a malformed {kind} schema: {exc.message}"
                    ) from exc

        # private copy behind a read-only view
        object.__setattr__(self, "procedures", MappingProxyType(dict(self.procedures)))
        log.debug("configured %d procedure(s), debug=%s", len(self.procedures), self.debug)

    @classmethod
    def from_env(cls, procedures: Mapping[str, Procedure]) -> "ServerConfig":
        """Build a config whose ``debug`` flag comes from ``RPC_DEBUG``.

        A ``.env`` file in the working directory is loaded first.
        """
        load_dotenv(os.path.join(Path.cwd(), ".env"))
        return cls(procedures=procedures, debug=env_flag("RPC_DEBUG"))
