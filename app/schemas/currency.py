from pydantic import BaseModel


class CurrencyBase(BaseModel):
    code: str
    name: str


class CurrencyCreate(CurrencyBase):
    pass


class CurrencyUpdate(BaseModel):
    # The code from the URL path always wins over the one in the body
    code: str | None = None
    name: str


class CurrencyResponse(CurrencyBase):

    class Config:
        from_attributes = True
