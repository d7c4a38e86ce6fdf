from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ShiftTemplate, TemplateFields


class ShiftTemplateRepository(Protocol):
    def list_active(self, *, tenant_id: int) -> Sequence[ShiftTemplate]:
        raise NotImplementedError

    def get_by_id(self, *, tenant_id: int, template_id: int) -> Optional[ShiftTemplate]:
        raise NotImplementedError

    def find_by_name(self, *, tenant_id: int, name: str) -> Optional[ShiftTemplate]:
        raise NotImplementedError

    def create(self, *, tenant_id: int, fields: TemplateFields, created_by: Optional[int] = None) -> int:
        raise NotImplementedError

    def update(self, *, tenant_id: int, template_id: int, fields: TemplateFields) -> bool:
        raise NotImplementedError

    def set_active(self, *, tenant_id: int, template_id: int, active: bool) -> bool:
        raise NotImplementedError
