"""Permission results and ready-made tool permission policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Union

READ_ONLY_TOOLS = frozenset({"Read", "Glob", "Grep"})
WRITE_TOOLS = frozenset({"Write", "Edit", "MultiEdit"})
RISKY_KEYWORDS = ("rm -rf", "mkfs", "dd if=/dev")
DANGEROUS_COMMANDS = ("rm -rf", "sudo", "chmod 777", "dd if=", "mkfs")
SYSTEM_DIRECTORIES = ("/etc/", "/usr/")
SAFE_PREFIXES = ("/tmp/", "./")
SAFE_OUTPUT_DIR = "./safe_output/"


@dataclass
class ToolPermissionContext:
    """Extra information passed along with a permission request."""

    suggestions: list[Any] = field(default_factory=list)


@dataclass
class PermissionResultAllow:
    """Allow the tool, optionally with replaced input."""

    updated_input: dict[str, Any] | None = None
    behavior: str = field(default="allow", init=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        out: dict[str, Any] = {"behavior": self.behavior}
        if self.updated_input is not None:
            out["updatedInput"] = self.updated_input
        return out


@dataclass
class PermissionResultDeny:
    """Deny the tool with a message, optionally interrupting execution."""

    message: str = ""
    interrupt: bool = False
    behavior: str = field(default="deny", init=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {"behavior": self.behavior, "message": self.message, "interrupt": self.interrupt}


PermissionResult = Union[PermissionResultAllow, PermissionResultDeny]


def is_risky_command(command: str) -> bool:
    """True when a shell command contains an obviously destructive pattern."""
    return any(keyword in command for keyword in RISKY_KEYWORDS)


def policy_permission_handler(
    tool_name: str,
    tool_input: dict[str, Any],
    context: ToolPermissionContext | None = None,
) -> PermissionResult:
    """A fixed policy: allow Read and safe Bash, deny Write and anything else."""
    if tool_name == "Bash":
        command = tool_input.get("command")
        if isinstance(command, str) and is_risky_command(command):
            return PermissionResultDeny(message="This command is too risky")
        return PermissionResultAllow()
    if tool_name == "Read":
        return PermissionResultAllow()
    if tool_name == "Write":
        return PermissionResultDeny(message="Write operations are disabled")
    return PermissionResultDeny(message="Unknown tool")


def _confirmed(ask: Callable[[str], str], prompt: str) -> bool:
    return ask(prompt).strip().lower() in ("y", "yes")


def _write_decision(tool_input: dict[str, Any], ask: Callable[[str], str]) -> PermissionResult:
    prompt = "Allow this write operation? (y/N): "
    denied = PermissionResultDeny(message="User denied write permission")
    file_path = tool_input.get("file_path")
    if not isinstance(file_path, str):
        return PermissionResultAllow() if _confirmed(ask, prompt) else denied
    if file_path.startswith(SYSTEM_DIRECTORIES):
        return PermissionResultDeny(message=f"Cannot write to system directory: {file_path}")
    if not _confirmed(ask, prompt):
        return denied
    if file_path.startswith(SAFE_PREFIXES):
        return PermissionResultAllow()
    safe_path = SAFE_OUTPUT_DIR + file_path.rsplit("/", 1)[-1]
    return PermissionResultAllow(updated_input={**tool_input, "file_path": safe_path})


def _bash_decision(tool_input: dict[str, Any], ask: Callable[[str], str]) -> PermissionResult:
    command = tool_input.get("command")
    if isinstance(command, str):
        for pattern in DANGEROUS_COMMANDS:
            if pattern in command:
                return PermissionResultDeny(
                    message=f"Dangerous command pattern detected: {pattern}"
                )
    if _confirmed(ask, "Allow this bash command? (y/N): "):
        return PermissionResultAllow()
    return PermissionResultDeny(message="User denied bash command permission")


def interactive_permission_callback(
    tool_name: str,
    tool_input: dict[str, Any],
    context: ToolPermissionContext | None = None,
    ask: Callable[[str], str] | None = None,
) -> PermissionResult:
    """Decide tool use, asking the user through ``ask`` where needed.

    Read-only tools are allowed outright; writes to system directories and
    dangerous shell commands are denied outright; approved writes outside
    ``/tmp/`` and ``./`` are redirected into ``./safe_output/``.
    """
    ask = ask if ask is not None else input
    if tool_name in READ_ONLY_TOOLS:
        return PermissionResultAllow()
    if tool_name in WRITE_TOOLS:
        return _write_decision(tool_input, ask)
    if tool_name == "Bash":
        return _bash_decision(tool_input, ask)
    if _confirmed(ask, "Allow this tool? (y/N): "):
        return PermissionResultAllow()
    return PermissionResultDeny(message="User denied permission")