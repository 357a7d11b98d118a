from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Organization id the attribution service reports for sandbox/test installs.
SANDBOX_ORG_ID = 1234567890


class AttributionRecord(BaseModel):
    """Campaign attribution payload returned by the AdServices API.

    Field names on the wire are camelCase; attributes are snake_case. Decoding
    is strict, so a string where a number is expected is a schema mismatch.
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    attribution: bool
    org_id: Optional[int] = Field(default=None, alias="orgId")
    campaign_id: Optional[int] = Field(default=None, alias="campaignId")
    conversion_type: Optional[str] = Field(default=None, alias="conversionType")
    claim_type: Optional[str] = Field(default=None, alias="claimType")
    click_date: Optional[str] = Field(default=None, alias="clickDate")
    ad_group_id: Optional[int] = Field(default=None, alias="adGroupId")
    country_or_region: Optional[str] = Field(default=None, alias="countryOrRegion")
    keyword_id: Optional[int] = Field(default=None, alias="keywordId")
    ad_id: Optional[int] = Field(default=None, alias="adId")

    @property
    def is_sandbox(self) -> bool:
        return self.org_id == SANDBOX_ORG_ID

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
