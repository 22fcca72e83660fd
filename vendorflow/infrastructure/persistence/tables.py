"""Table names shared by every record-store backend."""

SHARING_PERMISSIONS = "sharing_permissions"
SHARING_CHAINS = "sharing_chains"
DOCUMENT_PROVENANCE = "document_provenance"
SHARING_NOTIFICATIONS = "sharing_notifications"
DOCUMENTS = "documents"

# Columns that must be unique per table (besides id).
UNIQUE_COLUMNS: dict[str, tuple[str, ...]] = {
    SHARING_CHAINS: ("share_token",),
    DOCUMENT_PROVENANCE: ("document_id",),
}
