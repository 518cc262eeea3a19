"""
Shell command helpers
"""
import json


def escape_command(cmd: str) -> str:
    """
    Quote a command so a remote `shell -c` receives it verbatim.

    The whole command is wrapped in single quotes, each embedded single
    quote becomes '\\'' and each backtick is backslash-escaped.
    """
    quoted = "'" + cmd.replace("'", "'\\''") + "'"
    return quoted.replace("`", "\\`")


def shell_command(shell: str, cmd: str) -> str:
    """Build `<shell> -c '<cmd>'`"""
    return f"{shell} -c {escape_command(cmd)}"


def quote_value(value: str) -> str:
    """Double-quote a value with backslash escapes (Go %q style)"""
    return json.dumps(value, ensure_ascii=False)
