# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""Error definitions for resbundle.

Every failure aborts the whole generation run. Errors carry a stable code so
build logs and the JSON reporter can be matched by machines, plus an optional
context mapping naming the offending file(s).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_INPUT_NOT_FOUND = "E_INPUT_NOT_FOUND"
E_INPUT_READ = "E_INPUT_READ"
E_INPUT_TOO_LARGE = "E_INPUT_TOO_LARGE"
E_IDENT_COLLISION = "E_IDENT_COLLISION"
E_WRITE_IO = "E_WRITE_IO"
E_CONFIG = "E_CONFIG"
E_BUNDLE_FORMAT = "E_BUNDLE_FORMAT"


@dataclass
class BundleError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class InputError(BundleError):
    pass


class IdentifierCollisionError(BundleError):
    pass


class OutputWriteError(BundleError):
    pass


class ConfigError(BundleError):
    pass


class BundleFormatError(BundleError):
    pass


def input_error(
    code: str, path: Any, message: str, **context: Any
) -> InputError:
    return InputError(
        code=code, message=message, context={"path": str(path), **context}
    )


def config_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> ConfigError:
    return ConfigError(code=E_CONFIG, message=message, context=context)


__all__ = [
    "BundleError",
    "InputError",
    "IdentifierCollisionError",
    "OutputWriteError",
    "ConfigError",
    "BundleFormatError",
    "input_error",
    "config_error",
    "E_INPUT_NOT_FOUND",
    "E_INPUT_READ",
    "E_INPUT_TOO_LARGE",
    "E_IDENT_COLLISION",
    "E_WRITE_IO",
    "E_CONFIG",
    "E_BUNDLE_FORMAT",
]
