from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Faq(BaseModel):
    question: str
    answer: str


class ProductBase(BaseModel):
    name: Optional[str] = None
    imageUrls: Optional[List[str]] = None
    categoryId: Optional[str] = None
    colorId: Optional[str] = None
    productTypeId: Optional[str] = None
    plantTypeId: Optional[str] = None
    season: Optional[str] = None
    shortDescription: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    price: Optional[float] = Field(default=None, gt=0)
    originalPrice: Optional[float] = Field(default=None, gt=0)
    discountPercentage: Optional[float] = Field(default=None, ge=0, le=100)
    sizeRanges: Optional[List[str]] = None
    inStock: Optional[bool] = None
    isBestseller: Optional[bool] = None
    isTrending: Optional[bool] = None
    weight: Optional[str] = None
    dimensions: Optional[str] = None
    waterRequirement: Optional[str] = None
    sunlightRequirement: Optional[str] = None
    faqs: Optional[List[Faq]] = None

    def to_row(self) -> Dict[str, Any]:
        """Champs fournis -> colonnes de la table products."""
        data = self.model_dump(exclude_none=True)
        return {_COLUMNS[k]: v for k, v in data.items()}


class ProductCreate(ProductBase):
    name: str = Field(min_length=1)
    price: float = Field(gt=0)
    categoryId: str = Field(min_length=1)
    season: str = "All"
    inStock: bool = True


class ProductUpdate(ProductBase):
    pass


_COLUMNS = {
    "name": "name",
    "imageUrls": "image_urls",
    "categoryId": "category_id",
    "colorId": "color_id",
    "productTypeId": "product_type_id",
    "plantTypeId": "plant_type_id",
    "season": "season",
    "shortDescription": "short_description",
    "description": "description",
    "rating": "rating",
    "price": "price",
    "originalPrice": "original_price",
    "discountPercentage": "discount_percentage",
    "sizeRanges": "size_ranges",
    "inStock": "in_stock",
    "isBestseller": "is_bestseller",
    "isTrending": "is_trending",
    "weight": "weight",
    "dimensions": "dimensions",
    "waterRequirement": "water_requirement",
    "sunlightRequirement": "sunlight_requirement",
    "faqs": "faqs",
}
