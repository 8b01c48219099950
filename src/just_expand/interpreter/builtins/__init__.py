"""Shell builtins.

Builtins run inside the interpreter with access to its state, unlike
commands which only see a CommandContext snapshot.
"""

from .alias import alias_words, handle_alias, handle_unalias
from .cd import handle_cd
from .control import handle_exit, handle_return
from .local import handle_local
from .misc import handle_colon, handle_false, handle_true
from .set import handle_set, handle_shift
from .unset import handle_unset

BUILTINS = {
    ":": handle_colon,
    "alias": handle_alias,
    "unalias": handle_unalias,
    "true": handle_true,
    "false": handle_false,
    "cd": handle_cd,
    "set": handle_set,
    "shift": handle_shift,
    "local": handle_local,
    "unset": handle_unset,
    "return": handle_return,
    "exit": handle_exit,
}

__all__ = ["BUILTINS", "alias_words"]
