from __future__ import annotations

import shutil
import subprocess
from typing import List, Optional, Protocol, Sequence

from kozutsumi.core.errors import ChooserUnavailable


# Exit codes that mean "nothing selected" rather than "chooser broken".
#   1: no match
# 130: interrupted (Esc / Ctrl-C)
CANCEL_EXIT_CODES = (1, 130)


class Chooser(Protocol):
    def choose(self, candidates: Sequence[str], *, multi: bool) -> List[str]: ...


def parse_selection(output: str, candidates: Sequence[str], *, multi: bool) -> List[str]:
    """
    Map chooser output lines back to candidates by exact text.

    Unknown lines are ignored. Single-select keeps only the first match.
    """
    selected: List[str] = []
    for line in output.splitlines():
        if not line:
            continue
        match = next((c for c in candidates if c == line), None)
        if match is None:
            continue
        selected.append(match)
        if not multi:
            break
    return selected


class CommandChooser:
    """
    Runs an external selection program over newline-delimited stdin/stdout.

    The program must be on PATH; there is no fallback chooser. The call blocks
    until the program exits (no timeout: it waits on the user).
    """

    def __init__(
        self,
        program: str,
        *,
        args: Sequence[str] = (),
        multi_args: Sequence[str] = ("--multi",),
    ) -> None:
        if not isinstance(program, str) or not program:
            raise ChooserUnavailable(code="chooser.unavailable", message="Chooser program must be a non-empty string")
        self._program = program
        self._args = list(args)
        self._multi_args = list(multi_args)

    @property
    def program(self) -> str:
        return self._program

    def build_args(self, *, multi: bool) -> List[str]:
        args = list(self._args)
        if multi:
            args.extend(self._multi_args)
        return args

    def choose(self, candidates: Sequence[str], *, multi: bool) -> List[str]:
        exe = shutil.which(self._program)
        if exe is None:
            raise ChooserUnavailable(
                code="chooser.unavailable",
                message=f"Chooser program not found: {self._program}",
                data={"program": self._program},
            )

        argv = [exe] + self.build_args(multi=multi)
        payload = "".join(f"{c}\n" for c in candidates)
        try:
            cp = subprocess.run(argv, input=payload, stdout=subprocess.PIPE, text=True, check=False)
        except OSError as e:
            raise ChooserUnavailable(
                code="chooser.unavailable",
                message=f"Failed to start chooser: {self._program}",
                data={"program": self._program, "error": repr(e)},
            ) from e

        if cp.returncode in CANCEL_EXIT_CODES:
            return []
        if cp.returncode != 0:
            raise ChooserUnavailable(
                code="chooser.failed",
                message=f"Chooser {self._program} exited with status {cp.returncode}",
                data={"program": self._program, "returncode": cp.returncode},
            )
        return parse_selection(cp.stdout or "", candidates, multi=multi)


class FzfChooser(CommandChooser):
    """
    fzf with a reverse layout, tab navigation and a tmux popup when inside tmux.

    `preview` is a shell command template where `{}` is the highlighted line.
    """

    BASE_ARGS = (
        "--layout=reverse",
        "--bind=tab:down,shift-tab:up",
        "--cycle",
        "--no-sort",
        "--ansi",
        "--tmux=center,70%,40%",
    )
    MULTI_ARGS = (
        "--multi",
        "--bind=ctrl-a:select-all",
        "--bind=space:toggle+down",
    )

    def __init__(self, program: str = "fzf", *, preview: Optional[str] = None) -> None:
        args = list(self.BASE_ARGS)
        if preview:
            args.extend(["--preview-window=right:60%:wrap", "--preview", preview])
        super().__init__(program, args=args, multi_args=self.MULTI_ARGS)
        self._preview = preview

    @property
    def preview(self) -> Optional[str]:
        return self._preview
