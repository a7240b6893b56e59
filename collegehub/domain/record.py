"""
Shared wire-format handling for backend records.

The backend speaks camelCase JSON; domain models use snake_case attributes.
Each model declares its wire mapping in FIELD_MAP, and unknown keys are kept
in extra_fields so records round-trip without losing data.
"""

from dataclasses import fields
from typing import Any, ClassVar, Dict, Type, TypeVar

R = TypeVar("R", bound="ApiRecord")


class ApiRecord:
    """
    Mixin for dataclass records exchanged with the backend.

    Subclasses are dataclasses that define an `extra_fields` dict field and a
    FIELD_MAP of {wire_key: attribute_name}.
    """

    FIELD_MAP: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_dict(cls: Type[R], data: Dict[str, Any]) -> R:
        """
        Create a record from a backend JSON object.

        Expects identifiers already normalized to `id` (see
        collegehub.api.client.normalize_ids); a stray `_id` is kept as an
        extra field.

        Args:
            data: Parsed JSON object

        Returns:
            Record instance
        """
        attribute_names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        core_data: Dict[str, Any] = {}
        extra_data: Dict[str, Any] = {}

        for key, value in data.items():
            attribute = cls.FIELD_MAP.get(key)
            if attribute is None and key in attribute_names and key != "extra_fields":
                attribute = key
            if attribute is not None:
                core_data[attribute] = cls._convert_field(attribute, value)
            else:
                extra_data[key] = value

        return cls(**core_data, extra_fields=extra_data)  # type: ignore[call-arg]

    @classmethod
    def _convert_field(cls, attribute: str, value: Any) -> Any:
        """Hook for nested record conversion."""
        return value

    def to_dict(self, include_extra: bool = True) -> Dict[str, Any]:
        """
        Convert the record back to its camelCase wire form.

        None-valued optional fields are omitted.

        Args:
            include_extra: If True, flatten extra_fields into the output

        Returns:
            Dictionary representation
        """
        reverse_map = {attr: key for key, attr in self.FIELD_MAP.items()}
        data: Dict[str, Any] = {}

        for f in fields(self):  # type: ignore[arg-type]
            if f.name == "extra_fields":
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            data[reverse_map.get(f.name, f.name)] = self._export_field(value)

        if include_extra:
            data.update(getattr(self, "extra_fields", {}))

        return data

    @staticmethod
    def _export_field(value: Any) -> Any:
        if isinstance(value, ApiRecord):
            return value.to_dict()
        if isinstance(value, list):
            return [v.to_dict() if isinstance(v, ApiRecord) else v for v in value]
        return value

    def get_field(self, field_name: str, default: Any = None) -> Any:
        """
        Get field value, checking core attributes, then wire keys, then extras.
        """
        if field_name != "extra_fields" and hasattr(self, field_name):
            return getattr(self, field_name)

        attribute = self.FIELD_MAP.get(field_name)
        if attribute is not None:
            return getattr(self, attribute)

        return getattr(self, "extra_fields", {}).get(field_name, default)
