import pytest

from agentsdk.permissions import (
    PermissionResultAllow,
    PermissionResultDeny,
    ToolPermissionContext,
    interactive_permission_callback,
    is_risky_command,
    policy_permission_handler,
)


class Asker:
    def __init__(self, answer):
        self.answer = answer
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        return self.answer


def never_ask(prompt):
    raise AssertionError(f"unexpected prompt: {prompt}")


@pytest.mark.parametrize(
    "command, risky",
    [("rm -rf /", True), ("mkfs.ext4 /dev/sda", True), ("dd if=/dev/zero of=x", True),
     ("ls -la", False), ("echo hello", False)],
)
def test_is_risky_command(command, risky):
    assert is_risky_command(command) is risky


def test_allow_to_dict():
    assert PermissionResultAllow().to_dict() == {"behavior": "allow"}
    result = PermissionResultAllow(updated_input={"file_path": "x"})
    assert result.to_dict() == {"behavior": "allow", "updatedInput": {"file_path": "x"}}


def test_deny_to_dict():
    result = PermissionResultDeny(message="Unknown tool", interrupt=True)
    assert result.to_dict() == {"behavior": "deny", "message": "Unknown tool", "interrupt": True}


def test_policy_bash():
    ctx = ToolPermissionContext()
    assert policy_permission_handler("Bash", {"command": "ls"}, ctx).behavior == "allow"
    denied = policy_permission_handler("Bash", {"command": "rm -rf /tmp/x"}, ctx)
    assert denied.behavior == "deny"
    assert denied.message == "This command is too risky"
    assert policy_permission_handler("Bash", {}, ctx).behavior == "allow"


def test_policy_read_write_other():
    assert policy_permission_handler("Read", {}).behavior == "allow"
    write = policy_permission_handler("Write", {"file_path": "a"})
    assert write.message == "Write operations are disabled"
    other = policy_permission_handler("WebFetch", {})
    assert other.behavior == "deny"
    assert other.message == "Unknown tool"


@pytest.mark.parametrize("tool", ["Read", "Glob", "Grep"])
def test_interactive_read_only_allowed(tool):
    result = interactive_permission_callback(tool, {}, None, never_ask)
    assert result.behavior == "allow"
    assert result.updated_input is None
    assert result.to_dict() == {"behavior": "allow"}


@pytest.mark.parametrize("path", ["/etc/passwd", "/usr/bin/thing"])
def test_interactive_system_dir_denied(path):
    result = interactive_permission_callback("Write", {"file_path": path}, None, never_ask)
    assert result.behavior == "deny"
    assert result.message == f"Cannot write to system directory: {path}"


def test_interactive_write_redirected():
    ask = Asker("Yes\n")
    tool_input = {"file_path": "/home/u/hello.py", "content": "print(1)"}
    result = interactive_permission_callback("Write", tool_input, None, ask)
    assert result.behavior == "allow"
    assert result.updated_input == {"file_path": "./safe_output/hello.py", "content": "print(1)"}
    assert tool_input["file_path"] == "/home/u/hello.py"
    assert len(ask.prompts) == 1


@pytest.mark.parametrize("path", ["/tmp/out.txt", "./local.txt"])
def test_interactive_write_safe_path_kept(path):
    result = interactive_permission_callback("Edit", {"file_path": path}, None, Asker("y"))
    assert result.behavior == "allow"
    assert result.updated_input is None


def test_interactive_write_denied_by_user():
    result = interactive_permission_callback(
        "MultiEdit", {"file_path": "/home/u/a"}, None, Asker("n")
    )
    assert result.message == "User denied write permission"


def test_interactive_write_without_path():
    assert interactive_permission_callback("Write", {}, None, Asker("y")).behavior == "allow"
    denied = interactive_permission_callback("Write", {}, None, Asker(""))
    assert denied.message == "User denied write permission"


@pytest.mark.parametrize("pattern", ["rm -rf", "sudo", "chmod 777", "dd if=", "mkfs"])
def test_interactive_dangerous_bash(pattern):
    result = interactive_permission_callback(
        "Bash", {"command": f"x {pattern} y"}, None, never_ask
    )
    assert result.behavior == "deny"
    assert result.message == f"Dangerous command pattern detected: {pattern}"


def test_interactive_bash_asks():
    assert interactive_permission_callback("Bash", {"command": "ls"}, None, Asker("y")).behavior == "allow"
    denied = interactive_permission_callback("Bash", {"command": "ls"}, None, Asker("no"))
    assert denied.message == "User denied bash command permission"
    denied_no_cmd = interactive_permission_callback("Bash", {}, None, Asker("maybe"))
    assert denied_no_cmd.message == "User denied bash command permission"


def test_interactive_other_tool():
    assert interactive_permission_callback("WebFetch", {}, None, Asker(" YES ")).behavior == "allow"
    denied = interactive_permission_callback("WebFetch", {}, None, Asker("n"))
    assert denied.message == "User denied permission"
    assert denied.interrupt is False