from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EntityKind:
    """Per-kind wiring for an entity term store.

    Attributes:
        name: Short kind name ('item', 'property').
        terms_table: Association table name, before prefixing.
        id_column: Column holding the entity's numeric id.
        id_prefix: Letter used by serialized ids ('Q42', 'P31').
    """

    name: str
    terms_table: str
    id_column: str
    id_prefix: str

    def numeric_id(self, entity_id: int | str) -> int:
        """Extract the numeric id from an int or a serialized id string.

        Accepts `42`, `"42"` and `"Q42"` (for items). Raises ValueError for
        anything else, including ids of another kind.
        """

        if isinstance(entity_id, bool):
            raise ValueError(f"Invalid {self.name} id: {entity_id!r}")

        if isinstance(entity_id, int):
            n = entity_id
        elif isinstance(entity_id, str):
            raw = entity_id.strip()
            if raw[:1].upper() == self.id_prefix:
                raw = raw[1:]
            if not (raw.isascii() and raw.isdigit()):
                raise ValueError(f"Invalid {self.name} id: {entity_id!r}")
            n = int(raw)
        else:
            raise ValueError(f"Invalid {self.name} id: {entity_id!r}")

        if n < 0:
            raise ValueError(f"Invalid {self.name} id: {entity_id!r}")
        return n


ITEM = EntityKind(name="item", terms_table="item_terms", id_column="item_id", id_prefix="Q")
PROPERTY = EntityKind(
    name="property",
    terms_table="property_terms",
    id_column="property_id",
    id_prefix="P",
)

DEFAULT_ENTITY_KINDS: tuple[EntityKind, ...] = (ITEM, PROPERTY)
