"""Environment file utilities.

[CONFIG] Deployment scripts write the addresses they produce back into .env
without destroying comments or unrelated keys.
"""

from pathlib import Path
from typing import Dict, List, Optional


def _line_key(line: str) -> Optional[str]:
    stripped = line.strip()
    if not stripped or stripped.startswith("#") or "=" not in stripped:
        return None
    if stripped.startswith("export "):
        stripped = stripped[len("export "):].lstrip()
    return stripped.split("=", 1)[0].strip()


def update_env_variables(updates: Dict[str, object], env_path: Optional[str] = None) -> List[str]:
    """
    Set several KEY=value pairs in a .env file.

    Existing keys are rewritten in place (an `export ` prefix is kept),
    missing keys are appended, everything else is left untouched.

    Args:
        updates: Mapping of variable name to value
        env_path: Path to .env (default: ./.env)

    Returns:
        Keys that were appended rather than rewritten
    """
    path = Path(env_path) if env_path else Path(".env")
    pending = {key: str(value) for key, value in updates.items()}
    lines: List[str] = []

    if path.exists():
        for line in path.read_text().splitlines():
            key = _line_key(line)
            if key is not None and key in pending:
                prefix = "export " if line.strip().startswith("export ") else ""
                lines.append(f"{prefix}{key}={pending.pop(key)}")
            else:
                lines.append(line)

    appended = list(pending)
    if pending:
        if lines and lines[-1] != "":
            lines.append("")
        lines.extend(f"{key}={value}" for key, value in pending.items())

    path.write_text("\n".join(lines) + "\n")
    return appended


def update_env_variable(key: str, value: str, env_path: Optional[str] = None) -> None:
    """Update or append a single KEY=value in .env."""
    update_env_variables({key: value}, env_path)
