from typing import List, Optional, Union

from pydantic import BaseModel


class FaltamLigarResponse(BaseModel):
    faltam_ligar: Optional[Union[int, str]] = None
    error: Optional[str] = None


class WhitelistResponse(BaseModel):
    phones: List[str]
