"""Import block generation for generated Go files."""

from typing import Iterable, List

from ..database.type_mappers import DATATYPES_IMPORT, TIME_IMPORT, UUID_IMPORT

# Go type -> import path, for fields whose type alone implies an import
TYPE_IMPORTS = {
    "time.Time": TIME_IMPORT,
    "datatypes.JSON": DATATYPES_IMPORT,
    "uuid.UUID": UUID_IMPORT,
}


def is_stdlib(import_path: str) -> bool:
    """Standard library paths have no dot in their first element."""
    return "." not in import_path.split("/", 1)[0]


class ImportManager:
    """Tracks the imports a generated file needs."""

    def __init__(self):
        self._imports = set()

    def add(self, import_path: str):
        if import_path:
            self._imports.add(import_path)

    def add_multiple(self, *import_paths: str):
        for path in import_paths:
            self.add(path)

    def has(self, import_path: str) -> bool:
        return import_path in self._imports

    def get_all(self) -> List[str]:
        return sorted(self._imports)

    def __len__(self) -> int:
        return len(self._imports)

    def generate_import_block(self) -> str:
        """Render ``import (...)`` with stdlib first, then third-party.

        Each group is sorted and the groups are separated by a blank line.
        Returns an empty string when nothing needs importing.
        """
        if not self._imports:
            return ""

        paths = self.get_all()
        std_lib = [p for p in paths if is_stdlib(p)]
        third_party = [p for p in paths if not is_stdlib(p)]

        lines = ["import ("]
        lines.extend(f'\t"{path}"' for path in std_lib)
        if std_lib and third_party:
            lines.append("")
        lines.extend(f'\t"{path}"' for path in third_party)
        lines.append(")")
        return "\n".join(lines)


def detect_required_imports(fields: Iterable) -> ImportManager:
    """Scan struct fields and collect the imports their types require."""
    manager = ImportManager()
    for field in fields:
        base_type = field.type.lstrip("*")
        manager.add(TYPE_IMPORTS.get(base_type, ""))
        manager.add(field.import_path)
    return manager
