import os
from abc import ABC, abstractmethod
from typing import Callable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.reviews import Review as ReviewRow
from ..schemas.review_schemas import RatingSummary, Review
from .json_file import JsonFileCollection


class ReviewStore(ABC):

    @abstractmethod
    def create(self, review: Review) -> Review:
        """Persist a new review."""

    @abstractmethod
    def list_for_product(self, product_id: str, limit: int = 50) -> List[Review]:
        """Newest reviews of a product first."""

    @abstractmethod
    def rating_summary(self, product_id: str) -> RatingSummary:
        """Average rating and review count of a product."""


class FileReviewStore(ReviewStore):

    def __init__(self, path: str):
        self.collection = JsonFileCollection(path)

    @classmethod
    def in_dir(cls, data_dir: str) -> "FileReviewStore":
        return cls(os.path.join(data_dir, "reviews.json"))

    def _for_product(self, product_id: str) -> List[Review]:
        return [
            Review.model_validate(doc) for doc in self.collection.read()
            if doc.get("productId") == product_id
        ]

    def create(self, review: Review) -> Review:
        with self.collection.lock:
            documents = self.collection.read()
            documents.insert(0, review.model_dump(
                mode="json", by_alias=True, exclude_none=True))
            self.collection.write(documents)
        return review

    def list_for_product(self, product_id: str, limit: int = 50) -> List[Review]:
        reviews = sorted(self._for_product(product_id),
                         key=lambda r: r.created_at, reverse=True)
        return reviews[:max(0, limit)]

    def rating_summary(self, product_id: str) -> RatingSummary:
        reviews = self._for_product(product_id)
        if not reviews:
            return RatingSummary(average=0, count=0)

        total = sum(r.rating for r in reviews)
        return RatingSummary(average=total / len(reviews), count=len(reviews))


class SqlReviewStore(ReviewStore):

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    @staticmethod
    def _to_review(row: ReviewRow) -> Review:
        return Review(
            id=row.id,
            product_id=row.product_id,
            name=row.name,
            email=row.email,
            rating=row.rating,
            comment=row.comment,
            created_at=row.created_at,
        )

    def create(self, review: Review) -> Review:
        with self.session_factory() as db:
            db.add(ReviewRow(**review.model_dump()))
            db.commit()
        return review

    def list_for_product(self, product_id: str, limit: int = 50) -> List[Review]:
        with self.session_factory() as db:
            rows = db.query(ReviewRow).filter(
                ReviewRow.product_id == product_id
            ).order_by(ReviewRow.created_at.desc()).limit(max(0, limit)).all()
            return [self._to_review(row) for row in rows]

    def rating_summary(self, product_id: str) -> RatingSummary:
        with self.session_factory() as db:
            average, count = db.query(
                func.avg(ReviewRow.rating), func.count(ReviewRow.id)
            ).filter(ReviewRow.product_id == product_id).one()
            return RatingSummary(average=float(average or 0), count=int(count or 0))
