"""
TASKMAN - Configuration
=======================
Plain key -> string settings stored in {home}/config.json.

The home directory is $TASKMAN_HOME, or ~/.taskman when unset.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from .exceptions import InvalidParameterValueError, TaskmanError
from .prototype import resolve
from .render import parse_format
from .sorting import parse_sort_order

logger = logging.getLogger("taskman")

HOME_ENV_VAR = "TASKMAN_HOME"
DEFAULT_HOME = "~/.taskman"
CONFIG_FILE = "config.json"
TASKS_SUBDIR = "tasks"

LIST_NAME_REGEX = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


def taskman_home(home: Optional[str] = None) -> Path:
    return Path(home or os.environ.get(HOME_ENV_VAR) or DEFAULT_HOME).expanduser()


def _validate_list_name(value: str) -> None:
    if not LIST_NAME_REGEX.match(value):
        raise InvalidParameterValueError("list", value)


class TaskmanParameter(BaseModel):
    """A supported configuration parameter"""
    name: str
    description: str
    default: Optional[str] = None
    validator: Optional[Callable[[str], object]] = Field(default=None, exclude=True)

    def validate_value(self, value: str) -> None:
        if self.validator is None:
            return
        try:
            self.validator(value)
        except TaskmanError as e:
            raise InvalidParameterValueError(self.name, value) from e


SUPPORTED_PARAMETERS: List[TaskmanParameter] = [
    TaskmanParameter(
        name="list",
        description="Name of the current task list",
        default="default",
        validator=_validate_list_name,
    ),
    TaskmanParameter(
        name="sortorder",
        description="Default sort order, e.g. isfinished+priority-id+",
        validator=parse_sort_order,
    ),
    TaskmanParameter(
        name="format",
        description="Default output format: text, csv or json",
        default="text",
        validator=parse_format,
    ),
]


class ConfigStore:
    """Reads and writes the configuration file"""

    def __init__(self, path: Path, parameters: Optional[List[TaskmanParameter]] = None):
        self.path = Path(path)
        self.parameters = parameters or SUPPORTED_PARAMETERS
        self._values: Optional[Dict[str, str]] = None

    def resolve_parameter(self, name: str) -> TaskmanParameter:
        return resolve(name, self.parameters, lambda p: [p.name], "configuration parameter").entity

    @property
    def values(self) -> Dict[str, str]:
        if self._values is None:
            self._values = self._read()
        return self._values

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable configuration {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring unreadable configuration {self.path}: expected a JSON object")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, name: str) -> Optional[str]:
        parameter = self.resolve_parameter(name)
        return self.values.get(parameter.name, parameter.default)

    def set(self, name: str, value: str) -> TaskmanParameter:
        parameter = self.resolve_parameter(name)
        parameter.validate_value(value)
        self.values[parameter.name] = value
        self._write()
        logger.info(f"⚙️ Parameter '{parameter.name}' set to '{value}'")
        return parameter

    def unset(self, name: str) -> TaskmanParameter:
        parameter = self.resolve_parameter(name)
        self.values.pop(parameter.name, None)
        self._write()
        return parameter

    def items(self) -> List[tuple]:
        return [(p.name, self.values.get(p.name, p.default)) for p in self.parameters]

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.values, f, indent=2, sort_keys=True)
