from app.services.email_service import EmailService, email_service
from app.services.rating_aggregator import RatingAggregator, rating_aggregator
from app.services.vote_ledger import VoteLedger, vote_ledger
from app.services.content_filter import build_content_policy
from app.services.verification_store import VerificationStore, verification_store

# Domain services
from app.services.auth_service import AuthService, auth_service
from app.services.review_service import ReviewService, review_service
from app.services.catalog_service import CatalogService, catalog_service
from app.services.search_service import SearchService, search_service

__all__ = [
    # Collaborators
    "EmailService",
    "email_service",
    "RatingAggregator",
    "rating_aggregator",
    "VoteLedger",
    "vote_ledger",
    "build_content_policy",
    "VerificationStore",
    "verification_store",
    # Domain services
    "AuthService",
    "auth_service",
    "ReviewService",
    "review_service",
    "CatalogService",
    "catalog_service",
    "SearchService",
    "search_service",
]
