from __future__ import annotations

import subprocess
from typing import Dict, List, Optional

from api_health_exporter import config
from api_health_exporter.errors import InventoryUnavailable
from api_health_exporter.utils.logger import logger

UNASSIGNED_ADDRESS = "<none>"

_COLUMNS = "custom-columns=NAME:.metadata.name,EXTERNAL-IP:.status.loadBalancer.ingress[0].ip"


def build_command(namespace: Optional[str] = None, kubectl: Optional[str] = None) -> List[str]:
    """Command line listing services with their load balancer address, no header row."""
    return [
        kubectl or config.KUBECTL_BIN,
        "-n", namespace or config.NAMESPACE,
        "get", "service",
        "-o", _COLUMNS,
        "--no-headers",
    ]


def parse_service_table(text: str) -> Dict[str, str]:
    """
    Parse ``NAME ADDRESS`` rows into a name -> address mapping.

    Rows that do not have exactly two fields are ignored, as are rows whose
    address has not been assigned yet (``<none>``).
    """
    services: Dict[str, str] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) != 2:
            continue
        name, address = parts
        if address == UNASSIGNED_ADDRESS:
            continue
        services[name] = address
    return services


def list_endpoints(
    namespace: Optional[str] = None,
    kubectl: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Dict[str, str]:
    """
    Run the inventory command and return the discovered endpoints.

    Raises:
        InventoryUnavailable: the command could not be started, timed out or
            exited with a non-zero status.
    """
    cmd = build_command(namespace, kubectl)
    timeout = config.INVENTORY_TIMEOUT_SEC if timeout is None else timeout

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False)
    except subprocess.TimeoutExpired as e:
        raise InventoryUnavailable(f"{cmd[0]} did not finish within {timeout}s") from e
    except OSError as e:
        raise InventoryUnavailable(f"failed to run {cmd[0]}: {e}") from e

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise InventoryUnavailable(f"{cmd[0]} exited with status {proc.returncode}: {stderr}")

    services = parse_service_table(proc.stdout)
    logger.debug(f"Inventory returned {len(services)} endpoints")
    return services
