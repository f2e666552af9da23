from decimal import Decimal
from typing import Annotated, Optional
from pydantic import BaseModel, ConfigDict, Field as SchemaField, PlainSerializer
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, Integer, Numeric
from sqlmodel import SQLModel, Field

# Optimistic concurrency token; the ORM bumps it on every UPDATE
row_version_column = Column("row_version", Integer, nullable=False)


class Product(SQLModel, table=True):
    """Product model."""
    __tablename__ = "products"
    __mapper_args__ = {"version_id_col": row_version_column}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, description="Product name")
    unit_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Unit price"
    )
    row_version: Optional[int] = Field(
        default=None,
        sa_column=row_version_column,
        description="Concurrency token, assigned on insert"
    )


# Money in, JSON number out
Price = Annotated[
    Decimal,
    SchemaField(max_digits=18, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ProductSchema(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case accepted too."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProductCreate(ProductSchema):
    name: str
    unit_price: Price = Decimal("0")


class ProductUpdate(ProductSchema):
    id: Optional[int] = None
    name: str
    unit_price: Price = Decimal("0")
    row_version: Optional[int] = None


class ProductRead(ProductSchema):
    id: int
    name: str
    unit_price: Price
    row_version: Optional[int] = None

    @classmethod
    def from_entity(cls, product: Product) -> "ProductRead":
        return cls.model_validate(product.model_dump())
