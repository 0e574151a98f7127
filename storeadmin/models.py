# storeadmin/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Records carry the server identity as "_id" on the wire.


class CategoryIn(BaseModel):
    name: str


class Category(CategoryIn):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")


class ProductIn(BaseModel):
    name: str
    description: str = ""
    price: str
    category_ids: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None


class Product(ProductIn):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")


class OrderIn(BaseModel):
    date: str
    product_ids: List[str] = Field(default_factory=list)
    total: str = "0.00"


class Order(OrderIn):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
