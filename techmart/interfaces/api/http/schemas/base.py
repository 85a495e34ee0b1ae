"""
Base de los DTOs HTTP.

El contrato JSON es camelCase (firstName, totalCount, ...); los atributos
Python siguen en snake_case. populate_by_name permite construir los modelos
por nombre de atributo desde el código.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
