"""Read-side records exchanged with the indexer, wallet and listing service."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class Community(BaseModel):
    """A community grants are attested under."""

    uid: str = Field(..., description="Community attestation UID")
    name: str = Field(default="")
    network_id: int = Field(..., description="Network the community's attestations live on")

    @classmethod
    def from_indexer(cls, data: dict[str, Any]) -> "Community":
        details = data.get("details") or {}
        details = details.get("data", details)
        return cls(
            uid=data["uid"],
            name=details.get("name") or data.get("name") or "",
            network_id=int(data.get("chainID") or data.get("chainId")),
        )


class FundingProgram(BaseModel):
    """A funding program offered by a community."""

    program_id: str = Field(..., description="Program id, possibly suffixed with _<chainId>")
    title: str = Field(default="")
    network_id: Optional[int] = Field(None)

    @classmethod
    def from_indexer(cls, data: dict[str, Any]) -> "FundingProgram":
        metadata = data.get("metadata") or {}
        chain_id = data.get("chainID") or data.get("chainId")
        return cls(
            program_id=str(data["programId"]),
            title=metadata.get("title") or data.get("title") or "",
            network_id=int(chain_id) if chain_id is not None else None,
        )


class Track(BaseModel):
    """A sub-category of a funding program a project can opt into."""

    id: str
    name: str = Field(default="")
    description: Optional[str] = Field(None)

    @classmethod
    def from_indexer(cls, data: dict[str, Any]) -> "Track":
        return cls(id=str(data["id"]), name=data.get("name", ""), description=data.get("description"))


class ExistingGrant(BaseModel):
    """A grant the indexer already knows about on a project."""

    uid: str
    community_uid: Optional[str] = Field(None)
    title: Optional[str] = Field(None)
    program_id: Optional[str] = Field(None)
    description: Optional[str] = Field(None)

    @classmethod
    def from_indexer(cls, data: dict[str, Any]) -> "ExistingGrant":
        details = data.get("details") or {}
        # v2 payloads flatten details; v1 nests them under "data"
        details = details.get("data", details)
        community = data.get("community") or {}
        return cls(
            uid=data["uid"],
            community_uid=data.get("communityUID") or data.get("refUID") or community.get("uid"),
            title=details.get("title"),
            program_id=details.get("programId"),
            description=details.get("description"),
        )


class ProjectRecordSet(BaseModel):
    """Snapshot of a project's grants as seen by the indexer."""

    project_uid: str
    grants: list[ExistingGrant] = Field(default_factory=list)

    def find_grant(self, uid: str) -> Optional[ExistingGrant]:
        wanted = uid.lower()
        for grant in self.grants:
            if grant.uid.lower() == wanted:
                return grant
        return None


class TransactionReceipt(BaseModel):
    """Result of a signed and broadcast attestation."""

    attestation_uid: str = Field(..., description="UID of the new grant attestation")
    tx_hashes: list[str] = Field(default_factory=list)
    network_id: int

    @property
    def primary_tx_hash(self) -> Optional[str]:
        return self.tx_hashes[0] if self.tx_hashes else None


class SubmitterContext(BaseModel):
    """Who is submitting, and with what rights."""

    address: str
    project_uid: str
    is_project_admin: bool = False
    is_community_admin: bool = False

    @property
    def has_elevated_permissions(self) -> bool:
        return self.is_project_admin or self.is_community_admin
