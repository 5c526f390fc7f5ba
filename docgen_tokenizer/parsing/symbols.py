"""
Result record describing one recognized declaration.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import copy
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum


class SymbolKind(Enum):
    """Declaration kinds the parsers recognize."""
    FUNCTION = "function"
    CLASS = "class"
    VARIABLE = "variable"


@dataclass
class Param:
    """One parameter of a function declaration."""
    name: str
    type: Optional[str] = None
    val: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'type': self.type, 'val': self.val}


@dataclass
class ReturnInfo:
    """Whether the declaration returns something, and what, if known."""
    present: bool = True
    type: Optional[str] = None


@dataclass
class Symbols:
    """Mutable accumulator filled in by a parser."""
    name: str = ''
    type: Optional[SymbolKind] = None
    var_type: str = ''
    params: List[Param] = field(default_factory=list)
    returns: ReturnInfo = field(default_factory=ReturnInfo)

    def add_parameter(self, param: Param) -> None:
        self.params.append(param)

    def get_parameter(self, index: int) -> Optional[Param]:
        if 0 <= index < len(self.params):
            return self.params[index]
        return None

    def get_last_parameter_index(self) -> int:
        return len(self.params) - 1

    def last_parameter(self) -> Optional[Param]:
        return self.get_parameter(self.get_last_parameter_index())

    def is_empty(self) -> bool:
        return not self.name and self.type is None and not self.params

    def copy(self) -> 'Symbols':
        return copy.deepcopy(self)

    def update_from(self, other: 'Symbols') -> None:
        """Overwrite every field with the values of ``other``."""
        self.name = other.name
        self.type = other.type
        self.var_type = other.var_type
        self.params = other.params
        self.returns = other.returns

    def to_dict(self) -> Dict[str, Any]:
        """Shape handed to documentation template renderers."""
        return {
            'type': self.type.value if self.type else '',
            'name': self.name,
            'varType': self.var_type,
            'params': [param.to_dict() for param in self.params],
            'return': {'present': self.returns.present, 'type': self.returns.type},
        }
