"""
Vote ledger for reviews.

Each username holds at most one vote per review (one ``ReviewVote`` row,
direction up or down). Casting the same direction twice removes the vote,
casting the other direction flips it. ``Review.upvotes``/``downvotes`` are
the sizes of those sets, computed on read.
"""

from typing import Optional

from app.models.review import Review, ReviewVote, VoteDirection


class VoteLedger:

    def current_vote(self, review: Review, username: str) -> Optional[ReviewVote]:
        for vote in review.votes:
            if vote.username == username:
                return vote
        return None

    def cast(self, review: Review, username: str, direction: VoteDirection) -> Optional[VoteDirection]:
        """
        Apply an upvote or downvote toggle.

        Returns the user's vote after the change, or None when it was toggled off.
        """
        existing = self.current_vote(review, username)

        if existing is not None and existing.direction == direction:
            review.votes.remove(existing)
            result = None
        elif existing is not None:
            # Flip in place; one row per (review, username)
            existing.direction = direction
            result = direction
        else:
            review.votes.append(ReviewVote(username=username, direction=direction))
            result = direction

        return result


vote_ledger = VoteLedger()
