"""Chart of accounts directory.

Translates between the category/subcategory labels the client works with
(or the legacy ``CAT-xxx`` / ``SUB-xxx`` identifiers of the old category
model) and canonical account codes, and builds the category tree from the
chart of accounts.
"""

import logging
from datetime import datetime, UTC
from typing import Any, Optional

from fundbook.database.base import Document, DocumentStore
from fundbook.database.mappers import account_to_domain
from fundbook.domain.cache import LookupCache, MISSING
from fundbook.domain.constants import (
    ACCOUNTS_COLLECTION,
    ACCOUNT_TYPES,
    BALANCE_SHEET_TYPES,
    BANK_ACCOUNT_CODE,
    CASH_ACCOUNT_CODE,
    DEBIT_NORMAL_TYPES,
    DISPLAY_CATEGORY,
    DISPLAY_HIDDEN,
    DISPLAY_OPTIONS,
    DISPLAY_SUBCATEGORY,
    DONATIONS_ACCOUNT_CODE,
    INCOME_ROOT_CODE,
)
from fundbook.domain.entities import Account, CategoryListing, SubcategoryListing
from fundbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_code_exists,
    account_not_found,
    invalid_account_type,
)

logger = logging.getLogger(__name__)

# Fields an administrator may change after creation
UPDATABLE_FIELDS = (
    "account_name",
    "category_name",
    "subcategory_name",
    "budget_monthly",
    "budget_annual",
    "is_active",
)

DEFAULT_CHART: tuple[dict[str, Any], ...] = (
    {
        "account_code": CASH_ACCOUNT_CODE,
        "account_name": "Cash on Hand",
        "account_type": "asset",
        "system_account": True,
    },
    {
        "account_code": BANK_ACCOUNT_CODE,
        "account_name": "Bank Account",
        "account_type": "asset",
        "system_account": True,
    },
    {
        "account_code": INCOME_ROOT_CODE,
        "account_name": "Income",
        "account_type": "income",
        "system_account": True,
    },
    {
        "account_code": DONATIONS_ACCOUNT_CODE,
        "account_name": "Donations",
        "account_type": "income",
        "parent_code": INCOME_ROOT_CODE,
        "level": 2,
        "system_account": True,
    },
    {
        "account_code": "5100",
        "account_name": "Administrative Expenses",
        "account_type": "expense",
        "display_as": DISPLAY_CATEGORY,
        "category_name": "Operations",
        "legacy_category_id": "CAT-001",
    },
)


def normal_balance_for(account_type: str) -> str:
    """Assets and expenses increase with debits, everything else with credits."""
    return "debit" if account_type in DEBIT_NORMAL_TYPES else "credit"


def financial_statement_for(account_type: str) -> str:
    """Assets, liabilities and equity report on the balance sheet."""
    return "balance_sheet" if account_type in BALANCE_SHEET_TYPES else "income_statement"


def _sorted_by_code(documents: list[Document]) -> list[Document]:
    # Plain string ordering: "1000" < "4010" < "900"
    return sorted(documents, key=lambda doc: doc["account_code"])


class AccountDirectory:
    """Service for resolving and maintaining a tenant's chart of accounts."""

    def __init__(self, store: DocumentStore, cache: Optional[LookupCache] = None):
        """Initialize account directory.

        Args:
            store: DocumentStore instance
            cache: Optional lookup cache (a fresh one is created if omitted)
        """
        self.store = store
        self.cache = cache if cache is not None else LookupCache()

    def _cached_lookup(
        self, tenant: str, cache_key: str, filters: dict[str, Any], label: str
    ) -> Optional[str]:
        cached = self.cache.get(cache_key, MISSING)
        if cached is not MISSING:
            return cached

        matches = _sorted_by_code(self.store.query(tenant, ACCOUNTS_COLLECTION, filters=filters))
        if not matches:
            logger.warning("Account not found for %s (tenant %s)", label, tenant)
            self.cache.set(cache_key, None)
            return None

        code = matches[0]["account_code"]
        self.cache.set(cache_key, code)
        return code

    def resolve_by_category(
        self, tenant: str, category_name: str, subcategory_name: Optional[str] = None
    ) -> Optional[str]:
        """Resolve a category/subcategory label pair to an account code.

        Args:
            tenant: Tenant scope
            category_name: Category label (e.g., "Operations")
            subcategory_name: Optional subcategory label

        Returns:
            Account code, or None if the labels are uncategorized
        """
        cache_key = f"{tenant}:{category_name}:{subcategory_name or 'null'}"
        filters: dict[str, Any] = {"category_name": category_name}
        if subcategory_name:
            filters["subcategory_name"] = subcategory_name
            filters["display_as"] = DISPLAY_SUBCATEGORY
        else:
            filters["display_as"] = DISPLAY_CATEGORY
        return self._cached_lookup(tenant, cache_key, filters, f"{category_name}/{subcategory_name}")

    def resolve_by_legacy_id(
        self, tenant: str, category_id: str, subcategory_id: Optional[str] = None
    ) -> Optional[str]:
        """Resolve legacy category/subcategory identifiers to an account code.

        Args:
            tenant: Tenant scope
            category_id: Legacy category id (e.g., "CAT-001")
            subcategory_id: Optional legacy subcategory id (e.g., "SUB-003")

        Returns:
            Account code, or None if no account carries the identifier
        """
        cache_key = f"{tenant}:legacy:{category_id}:{subcategory_id or 'null'}"
        if subcategory_id:
            filters: dict[str, Any] = {"legacy_subcategory_id": subcategory_id}
        else:
            filters = {"legacy_category_id": category_id, "display_as": DISPLAY_CATEGORY}
        return self._cached_lookup(tenant, cache_key, filters, f"{category_id}/{subcategory_id}")

    def list_categories_from_accounts(self, tenant: str) -> list[CategoryListing]:
        """Build the category tree from category and subcategory accounts.

        Categories and their subcategories are ordered by account code using
        plain string comparison.
        """
        category_docs = _sorted_by_code(
            self.store.query(tenant, ACCOUNTS_COLLECTION, filters={"display_as": DISPLAY_CATEGORY})
        )

        categories = []
        for doc in category_docs:
            code = doc["account_code"]
            subcategory_docs = _sorted_by_code(
                self.store.query(
                    tenant,
                    ACCOUNTS_COLLECTION,
                    filters={"parent_code": code, "display_as": DISPLAY_SUBCATEGORY},
                )
            )
            subcategories = tuple(
                SubcategoryListing(
                    id=sub.get("legacy_subcategory_id") or f"SUB-{sub['account_code']}",
                    name=sub.get("subcategory_name") or sub.get("account_name") or sub["account_code"],
                )
                for sub in subcategory_docs
            )
            categories.append(
                CategoryListing(
                    id=doc["id"],
                    legacy_id=doc.get("legacy_category_id") or f"CAT-{code}",
                    code=code,
                    name=doc.get("category_name") or doc.get("account_name") or code,
                    subcategories=subcategories,
                    active=doc.get("is_active") is not False,
                )
            )
        return categories

    def get_account(self, tenant: str, account_code: str) -> Optional[Account]:
        """Get account by code.

        Returns:
            Account entity or None if not found
        """
        document = self.store.get(tenant, ACCOUNTS_COLLECTION, account_code)
        if document is None:
            return None
        return account_to_domain(document)

    def create_account(self, tenant: str, data: dict[str, Any]) -> str:
        """Create a new account keyed by its code.

        Args:
            tenant: Tenant scope
            data: Account fields; ``account_code`` and ``account_name`` are required

        Returns:
            Account code

        Raises:
            ValidationError: If required fields are missing or values are invalid
            ConflictError: If the code is already in use
        """
        account_code = str(data.get("account_code") or "").strip()
        account_name = data.get("account_name")
        if not account_code:
            raise ValidationError("account_code is required")
        if not account_name:
            raise ValidationError("account_name is required")

        account_type = data.get("account_type") or "expense"
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(invalid_account_type(account_type))

        display_as = data.get("display_as") or DISPLAY_HIDDEN
        if display_as not in DISPLAY_OPTIONS:
            raise ValidationError(
                f"Invalid display_as '{display_as}'. Expected one of: {', '.join(DISPLAY_OPTIONS)}"
            )

        if self.store.get(tenant, ACCOUNTS_COLLECTION, account_code) is not None:
            raise ConflictError(account_code_exists(tenant, account_code))

        account = {
            "account_code": account_code,
            "account_name": account_name,
            "account_type": account_type,
            "display_as": display_as,
            "level": data.get("level") or 1,
            "parent_code": data.get("parent_code"),
            "category_name": data.get("category_name"),
            "subcategory_name": data.get("subcategory_name"),
            "legacy_category_id": data.get("legacy_category_id"),
            "legacy_subcategory_id": data.get("legacy_subcategory_id"),
            "normal_balance": normal_balance_for(account_type),
            "financial_statement": financial_statement_for(account_type),
            "is_active": True,
            "system_account": bool(data.get("system_account", False)),
            "budget_monthly": data.get("budget_monthly") or 0,
            "budget_annual": data.get("budget_annual") or 0,
            "created_at": datetime.now(UTC),
            "created_by": data.get("created_by") or "system",
        }
        self.store.add(tenant, ACCOUNTS_COLLECTION, account, key=account_code)
        logger.info("Created account %s (%s) for tenant %s", account_code, account_name, tenant)
        return account_code

    def update_account(self, tenant: str, account_code: str, updates: dict[str, Any]) -> None:
        """Apply whitelisted field updates to an account.

        Keys outside UPDATABLE_FIELDS are ignored; the code, type and
        hierarchy of an account are fixed once it exists.

        Raises:
            NotFoundError: If the account does not exist
        """
        if self.store.get(tenant, ACCOUNTS_COLLECTION, account_code) is None:
            raise NotFoundError(account_not_found(tenant, account_code))

        allowed = {field: updates[field] for field in UPDATABLE_FIELDS if updates.get(field) is not None}
        ignored = sorted(set(updates) - set(UPDATABLE_FIELDS))
        if ignored:
            logger.debug("Ignoring immutable account fields %s for %s", ignored, account_code)

        allowed["updated_at"] = datetime.now(UTC)
        self.store.update_fields(tenant, ACCOUNTS_COLLECTION, account_code, allowed)

    def deactivate_account(self, tenant: str, account_code: str) -> None:
        """Mark an account inactive. Accounts are never deleted."""
        self.update_account(tenant, account_code, {"is_active": False})

    def seed_default_chart(self, tenant: str) -> int:
        """Create the default chart of accounts for a new tenant.

        Accounts whose code already exists are left untouched.

        Returns:
            Number of accounts created
        """
        created = 0
        for account in DEFAULT_CHART:
            if self.store.get(tenant, ACCOUNTS_COLLECTION, account["account_code"]) is not None:
                continue
            self.create_account(tenant, account)
            created += 1
        return created
