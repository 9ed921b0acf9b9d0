"""Gateway table loading.

A deployment keeps one table per environment (``prod.yaml``) next to a
shared ``default.yaml``. The table ships inside the package, so the default
location does not depend on the working directory.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from iam_api.models.gateway import GatewayTable

logger = logging.getLogger(__name__)


class GatewayTableLoadError(Exception):
    pass


def resolve_gateway_table(
    gateway_dir: str | Path,
    environment: str,
    default_file: str = "default.yaml",
) -> Path:
    """Return the table file for ``environment``, else the shared default."""
    directory = Path(gateway_dir)
    candidates = [directory / f"{environment}.yaml", directory / default_file]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    checked = ", ".join(str(c) for c in candidates)
    raise GatewayTableLoadError(
        f"No gateway table found for environment '{environment}' (checked: {checked})"
    )


def load_gateway_table(path: str | Path) -> GatewayTable:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise GatewayTableLoadError(f"Gateway table not found: {path}") from e
    except OSError as e:
        raise GatewayTableLoadError(f"Cannot read gateway table {path}: {e}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise GatewayTableLoadError(f"YAML parse error in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise GatewayTableLoadError(
            f"{path}: gateway table must be a YAML mapping with a 'gateways' list, "
            f"got {type(raw).__name__}"
        )

    try:
        table = GatewayTable.model_validate(raw)
    except ValidationError as e:
        raise GatewayTableLoadError(
            f"Gateway table validation error in {path}: {_describe_errors(e, raw)}"
        ) from e

    logger.debug("Gateway table loaded | path=%s gateways=%d", path, len(table.gateways))
    return table


def load_gateway_table_for_environment(
    gateway_dir: str | Path,
    environment: str,
    default_file: str = "default.yaml",
) -> GatewayTable:
    return load_gateway_table(resolve_gateway_table(gateway_dir, environment, default_file))


def _describe_errors(exc: ValidationError, raw: dict[str, Any]) -> str:
    """One clause per error, naming the gateway entry where there is one.

    ``("gateways", 1, "access")`` becomes ``gateways[1] 'api-b' access: ...``.
    """
    entries = raw.get("gateways")
    clauses = []
    for error in exc.errors(include_url=False):
        loc = error["loc"]
        if len(loc) >= 2 and loc[0] == "gateways" and isinstance(loc[1], int):
            where = f"gateways[{loc[1]}]"
            entry = entries[loc[1]] if isinstance(entries, list) else None
            if isinstance(entry, dict) and entry.get("name"):
                where += f" '{entry['name']}'"
            field = ".".join(str(part) for part in loc[2:])
        else:
            where = ".".join(str(part) for part in loc) or "table"
            field = ""
        clauses.append(f"{where} {field}: {error['msg']}" if field else f"{where}: {error['msg']}")
    return "; ".join(clauses)
