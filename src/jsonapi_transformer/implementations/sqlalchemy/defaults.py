import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore


def default_extract_properties(mapper: orm.Mapper) -> typing.Iterator[orm.interfaces.MapperProperty]:
    for attr in mapper.attrs:
        if isinstance(attr, orm.ColumnProperty) and isinstance(attr.expression, sa.Column):
            col = attr.expression
            # foreign keys are exposed through the relationships instead
            if any(col.key in c.column_keys for c in col.table.foreign_key_constraints):
                continue
        yield attr


def id_property_names_for_mapper(mapper: orm.Mapper) -> typing.List[str]:
    return [mapper.get_property_by_column(col).key for col in mapper.primary_key]


def type_alias_for_mapper(mapper: orm.Mapper) -> str:
    return mapper.local_table.name
