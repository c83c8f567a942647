"""
Тесты разрешения схем в объявления
"""

import pytest

from openapi_declarations.internal.types.models import ApiSchema, Declarations
from openapi_declarations.internal.types.schema_resolver import (
    SchemaResolver,
    forward_reference,
    is_primitive_type,
    scalar_type,
)


@pytest.fixture
def declarations():
    return Declarations()


@pytest.fixture
def resolver(declarations):
    return SchemaResolver(declarations)


def _pet_schema(name="Pet"):
    return ApiSchema(
        name=name,
        type="object",
        required=["id"],
        properties={
            "id": ApiSchema(name=f"{name}Id", type="integer"),
            "name": ApiSchema(name=f"{name}Name", type="string", nullable=True),
            "tag": ApiSchema(name=f"{name}Tag", reference="Tag"),
        },
    )


class TestScalarTable:
    """Каждое соответствие таблицы простых типов"""

    def test_integer(self):
        assert scalar_type("integer") == "int"

    def test_number(self):
        assert scalar_type("number") == "float"

    def test_int64(self):
        assert scalar_type("integer", "int64") == "int"
        assert scalar_type("number", "int64") == "int"

    def test_string(self):
        assert scalar_type("string") == "str"

    def test_date(self):
        assert scalar_type("string", "date") == "datetime.date"

    def test_date_time(self):
        assert scalar_type("string", "date-time") == "datetime.datetime"

    def test_binary(self):
        assert scalar_type("string", "binary") == "bytes"

    def test_boolean(self):
        assert scalar_type("boolean") == "bool"

    def test_bare_array(self):
        assert scalar_type("array") == "List[Any]"

    def test_object_and_unspecified(self):
        assert scalar_type("object") == "Dict[str, Any]"
        assert scalar_type("") == "Dict[str, Any]"
        assert scalar_type(None) == "Dict[str, Any]"
        assert scalar_type("unknown") == "Dict[str, Any]"

    def test_null(self):
        assert scalar_type("null") == "None"


class TestPrimitiveTypes:
    def test_primitive_names(self):
        for name in ("str", "int", "bytes", "datetime.date", "Dict[str, Any]"):
            assert is_primitive_type(name)

    def test_list_of_primitive(self):
        assert is_primitive_type("List[List[str]]")
        assert not is_primitive_type("List[Pet]")
        assert not is_primitive_type("Pet")

    def test_forward_reference(self):
        assert forward_reference("Pet") == '"Pet"'
        assert forward_reference("List[int]") == "List[int]"


class TestSchemaResolver:
    """Тесты резолвера схем"""

    def test_reference_returned_verbatim(self, resolver, declarations):
        name = resolver.resolve(ApiSchema(name="owner", reference="Person"))

        assert name == "Person"
        assert declarations.type_names() == []

    def test_scalar_does_not_declare(self, resolver, declarations):
        assert resolver.resolve(ApiSchema(name="count", type="integer")) == "int"
        assert resolver.resolve(ApiSchema(name="list", type="array")) == "List[Any]"
        assert declarations.type_names() == []

    def test_object_declaration(self, resolver, declarations):
        name = resolver.resolve(_pet_schema())

        assert name == "Pet"
        declaration = declarations.structural[0]
        assert declaration.source_text == (
            "class Pet(BaseModel):\n"
            "    id: int\n"
            "    name: Optional[str] = None\n"
            "    tag: Optional[Tag] = None"
        )
        assert declaration.dependency_names == ["Tag"]

    def test_nullable_required_field(self, resolver, declarations):
        schema = ApiSchema(
            name="Note",
            type="object",
            required=["text"],
            properties={"text": ApiSchema(name="NoteText", type="string", nullable=True)},
        )

        resolver.resolve(schema)

        assert "    text: Optional[str]" in declarations.structural[0].source_text.splitlines()

    def test_field_alias(self, resolver, declarations):
        schema = ApiSchema(
            name="User",
            type="object",
            required=["first-name"],
            properties={
                "first-name": ApiSchema(name="UserFirstName", type="string"),
                "class": ApiSchema(name="UserClass", type="string"),
            },
        )

        resolver.resolve(schema)

        assert declarations.structural[0].source_text == (
            "class User(BaseModel):\n"
            "    model_config = ConfigDict(populate_by_name=True)\n"
            "\n"
            '    first_name: str = Field(alias="first-name")\n'
            '    class_: Optional[str] = Field(default=None, alias="class")'
        )

    def test_field_name_shadowing_type(self, resolver, declarations):
        """Имя поля не совпадает с именем своего типа"""
        schema = ApiSchema(
            name="Order",
            type="object",
            properties={"Pet": ApiSchema(name="OrderPet", reference="Pet")},
        )

        resolver.resolve(schema)

        assert (
            '    Pet_: Optional[Pet] = Field(default=None, alias="Pet")'
            in declarations.structural[0].source_text
        )

    def test_empty_object(self, resolver, declarations):
        resolver.resolve(ApiSchema(name="Anything", type="object"))

        assert declarations.structural[0].source_text == (
            "class Anything(BaseModel):\n" '    model_config = ConfigDict(extra="allow")'
        )

    def test_children_declared_before_parent(self, resolver, declarations):
        schema = ApiSchema(
            name="Pet",
            type="object",
            properties={
                "address": ApiSchema(
                    name="PetAddress",
                    type="object",
                    properties={"city": ApiSchema(name="PetAddressCity", type="string")},
                )
            },
        )

        resolver.resolve(schema)

        assert [d.name for d in declarations.structural] == ["PetAddress", "Pet"]
        assert declarations.structural[1].dependency_names == ["PetAddress"]

    def test_idempotence(self, resolver, declarations):
        """Повторное разрешение той же схемы не дублирует объявление"""
        schema = _pet_schema()

        assert resolver.resolve(schema) == resolver.resolve(schema) == "Pet"
        assert declarations.type_names() == ["Pet"]

    def test_first_wins_name_collision(self, resolver, declarations):
        """Разные схемы с одинаковым именем схлопываются в первую"""
        first = ApiSchema(
            name="user",
            type="object",
            properties={"a": ApiSchema(name="userA", type="string")},
        )
        second = ApiSchema(
            name="User",
            type="object",
            properties={"b": ApiSchema(name="UserB", type="integer")},
        )

        assert resolver.resolve(first) == "User"
        assert resolver.resolve(second) == "User"

        assert len(declarations.structural) == 1
        assert declarations.structural[0].source_text == (
            "class User(BaseModel):\n" "    a: Optional[str] = None"
        )

    def test_string_enum(self, resolver, declarations):
        name = resolver.resolve(ApiSchema(name="Status", type="string", enum=["A", "B"]))

        assert name == "Status"
        assert declarations.enums[0].source_text == (
            "class Status(str, Enum):\n" '    A = "A"\n' '    B = "B"'
        )
        assert declarations.aliases == []

    def test_numeric_enum(self, resolver, declarations):
        name = resolver.resolve(ApiSchema(name="Level", type="integer", enum=[1, 2, 3]))

        assert name == "Level"
        assert declarations.aliases[0].source_text == "Level = Literal[1, 2, 3]"
        assert declarations.enums == []

    def test_mixed_enum(self, resolver, declarations):
        resolver.resolve(ApiSchema(name="Flag", enum=["on", True, None]))

        assert declarations.aliases[0].source_text == 'Flag = Literal["on", True, None]'

    def test_enum_member_names(self, resolver, declarations):
        resolver.resolve(
            ApiSchema(name="Kind", type="string", enum=["in-progress", "in_progress", "1"])
        )

        assert declarations.enums[0].source_text == (
            "class Kind(str, Enum):\n"
            '    in_progress = "in-progress"\n'
            '    in_progress_ = "in_progress"\n'
            '    VALUE_1 = "1"'
        )

    def test_array_alias(self, resolver, declarations):
        schema = ApiSchema(
            name="Pets", type="array", items=ApiSchema(name="PetsItem", reference="Pet")
        )

        assert resolver.resolve(schema) == "Pets"
        assert declarations.aliases[0].source_text == 'Pets = List["Pet"]'
        assert declarations.aliases[0].dependency_names == ["Pet"]

    def test_array_of_primitive(self, resolver, declarations):
        schema = ApiSchema(
            name="tags", type="array", items=ApiSchema(name="tagsItem", type="string")
        )

        assert resolver.resolve(schema) == "Tags"
        assert declarations.aliases[0].source_text == "Tags = List[str]"
        assert declarations.aliases[0].dependency_names == []

    def test_all_of_inherits_members(self, resolver, declarations):
        schema = ApiSchema(
            name="Dog",
            all_of=[
                ApiSchema(name="DogAllOf0", reference="Pet"),
                ApiSchema(
                    name="DogAllOf1",
                    type="object",
                    properties={"bark": ApiSchema(name="DogAllOf1Bark", type="boolean")},
                ),
            ],
        )

        assert resolver.resolve(schema) == "Dog"
        assert [d.name for d in declarations.structural] == ["DogAllOf1"]
        assert declarations.aliases[0].source_text == (
            "class Dog(Pet, DogAllOf1):\n" "    pass"
        )
        assert declarations.aliases[0].dependency_names == ["Pet", "DogAllOf1"]
        assert declarations.aliases[0].base_names == ["Pet", "DogAllOf1"]

    def test_all_of_primitive_degrades(self, resolver, declarations):
        schema = ApiSchema(
            name="Identifier", all_of=[ApiSchema(name="IdentifierAllOf0", type="string")]
        )

        resolver.resolve(schema)

        assert declarations.aliases[0].source_text == "Identifier = str"

    def test_one_of_and_any_of_identical(self):
        """oneOf и anyOf над одинаковыми схемами дают одинаковый код"""
        members = [
            ApiSchema(name="ChoiceOf0", reference="Cat"),
            ApiSchema(name="ChoiceOf1", type="integer"),
        ]

        one_of = Declarations()
        SchemaResolver(one_of).resolve(ApiSchema(name="Choice", one_of=members))
        any_of = Declarations()
        SchemaResolver(any_of).resolve(ApiSchema(name="Choice", any_of=members))

        assert one_of.aliases[0].source_text == any_of.aliases[0].source_text
        assert one_of.aliases[0].source_text == 'Choice = Union["Cat", int]'
        assert one_of == any_of

    def test_fresh_declarations_do_not_share_memo(self):
        first = Declarations()
        SchemaResolver(first).resolve(_pet_schema())
        second = Declarations()
        SchemaResolver(second).resolve(_pet_schema())

        assert first.type_names() == second.type_names() == ["Pet"]
