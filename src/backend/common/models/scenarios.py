"""Scenario catalog models.

A scenario is a predefined Xero query: which endpoint to call, which
parameters the user may fill in, and whether the rows are aggregated per
bank account. Field aliases match the camelCase keys of the catalog file.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ParameterOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class ParameterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: Literal["text", "date", "select", "hidden"] = "text"
    label: Optional[str] = None
    required: bool = False
    value: Optional[str] = None
    options: List[ParameterOption] = Field(default_factory=list)
    default: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.label or self.name


class ScenarioDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str = ""
    endpoint: str
    method: Literal["GET", "POST"] = "GET"
    parameters: List[ParameterSpec] = Field(default_factory=list)
    display_fields: Optional[List[str]] = Field(default=None, alias="displayFields")
    aggregate_by_account: bool = Field(default=False, alias="aggregateByAccount")
    fetch_all_accounts: bool = Field(default=False, alias="fetchAllAccounts")
    accounts_endpoint: Optional[str] = Field(default=None, alias="accountsEndpoint")

    @property
    def fetches_reference_accounts(self) -> bool:
        return bool(self.fetch_all_accounts and self.accounts_endpoint)
