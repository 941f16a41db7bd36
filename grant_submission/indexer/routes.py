"""Indexer API paths."""

from urllib.parse import quote


def _seg(value: object) -> str:
    return quote(str(value), safe="")


def attestation_listener(tx_hash: str, network_id: int) -> str:
    return f"/attestations/index-by-transaction/{_seg(tx_hash)}/{network_id}"


def project_grants(project_uid: str) -> str:
    return f"/v2/projects/{_seg(project_uid)}/grants"


def project_tracks(project_uid: str) -> str:
    return f"/v2/projects/{_seg(project_uid)}/tracks"


def community(community_uid: str) -> str:
    return f"/v2/communities/{_seg(community_uid)}"


def community_programs(community_uid: str) -> str:
    return f"/communities/{_seg(community_uid)}/programs"


def program_tracks(program_id: str) -> str:
    return f"/v2/programs/{_seg(program_id)}/tracks"
