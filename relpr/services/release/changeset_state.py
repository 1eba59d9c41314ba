from __future__ import annotations

import json
from pathlib import Path

from relpr.core.result import Err, Ok, Result
from relpr.core.structured import as_str_dict, get_str
from relpr.services.release.errors import ReleaseError
from relpr.services.release.model import PreState

PRE_STATE_FILE = Path(".changeset") / "pre.json"


def read_pre_state(project_root: Path) -> Result[PreState | None, ReleaseError]:
    """Active pre-release mode of the repository, if any.

    ``changeset pre exit`` leaves pre.json in place with mode "exit" until
    the next version run; that is not pre mode.
    """
    path = project_root / PRE_STATE_FILE
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Ok(None)
    except OSError as e:
        return Err(ReleaseError(kind="io_error", message=f"failed to read pre state: {e}", hint=str(path)))

    try:
        obj: object = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="config_error", message=f"invalid pre.json: {e}", hint=str(path)))

    data = as_str_dict(obj)
    mode = get_str(data, "mode") if data is not None else None
    tag = get_str(data, "tag") if data is not None else None
    if mode is None or tag is None:
        return Err(
            ReleaseError(
                kind="config_error",
                message="pre.json must have string 'mode' and 'tag'",
                hint=str(path),
            )
        )

    state = PreState(mode=mode, tag=tag)
    return Ok(state if state.active else None)
