"""Tests for the wishlist API."""

import pytest
from sqlalchemy.exc import IntegrityError

from hearth.models.enums import PropertyStatus, UserRole
from hearth.models.wishlist import WishlistItem


@pytest.fixture
def saver(make_user, make_property):
    owner = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    listing = make_property(owner, title="Lake view cottage", property_type="house", listing_type="rent")
    return buyer, listing


class TestWishlist:
    """Tests for /api/users/wishlist."""

    def test_add_with_notes(self, client, auth, saver) -> None:
        buyer, listing = saver

        response = client.post(
            f"/api/users/wishlist/{listing.id}",
            json={"notes": "  Ask about pets  "},
            headers=auth(buyer),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Property added to wishlist"
        item = body["data"]["wishlistItem"]
        assert item["notes"] == "Ask about pets"
        assert item["property"]["title"] == "Lake view cottage"
        assert item["property"]["propertyType"] == "house"
        assert item["property"]["listingType"] == "rent"

    def test_add_without_body(self, client, auth, saver) -> None:
        buyer, listing = saver
        response = client.post(f"/api/users/wishlist/{listing.id}", headers=auth(buyer))
        assert response.status_code == 201
        assert response.json()["data"]["wishlistItem"]["notes"] is None

    def test_duplicate_rejected(self, client, auth, saver) -> None:
        buyer, listing = saver
        client.post(f"/api/users/wishlist/{listing.id}", headers=auth(buyer))

        response = client.post(f"/api/users/wishlist/{listing.id}", headers=auth(buyer))
        assert response.status_code == 400
        assert response.json()["message"] == "Property already in wishlist"

    def test_missing_property(self, client, auth, make_user) -> None:
        buyer = make_user()
        response = client.post("/api/users/wishlist/999", headers=auth(buyer))
        assert response.status_code == 404

    def test_notes_length(self, client, auth, saver) -> None:
        buyer, listing = saver
        response = client.post(
            f"/api/users/wishlist/{listing.id}", json={"notes": "x" * 501}, headers=auth(buyer)
        )
        assert response.status_code == 400

    def test_list_newest_first_and_private(self, client, auth, make_user, make_property, saver) -> None:
        buyer, listing = saver
        second = make_property(listing.owner, title="Withdrawn flat", status=PropertyStatus.INACTIVE.value)
        stranger = make_user()
        client.post(f"/api/users/wishlist/{listing.id}", headers=auth(buyer))
        client.post(f"/api/users/wishlist/{second.id}", headers=auth(buyer))

        data = client.get("/api/users/wishlist", headers=auth(buyer)).json()["data"]
        assert [i["property"]["title"] for i in data["items"]] == ["Withdrawn flat", "Lake view cottage"]
        assert data["items"][0]["property"]["status"] == "inactive"
        assert data["pagination"]["total"] == 2
        assert data["pagination"]["limit"] == 10

        others = client.get("/api/users/wishlist", headers=auth(stranger)).json()["data"]
        assert others["items"] == []

    def test_remove(self, client, auth, saver) -> None:
        buyer, listing = saver
        client.post(f"/api/users/wishlist/{listing.id}", headers=auth(buyer))

        response = client.delete(f"/api/users/wishlist/{listing.id}", headers=auth(buyer))
        assert response.status_code == 200
        assert response.json()["message"] == "Property removed from wishlist"
        assert client.get("/api/users/wishlist", headers=auth(buyer)).json()["data"]["items"] == []

    def test_remove_missing(self, client, auth, saver) -> None:
        buyer, listing = saver
        response = client.delete(f"/api/users/wishlist/{listing.id}", headers=auth(buyer))
        assert response.status_code == 404
        assert response.json()["message"] == "Property not found in wishlist"

    def test_requires_identity(self, client) -> None:
        assert client.get("/api/users/wishlist").status_code == 401

    def test_pair_is_unique_in_storage(self, db, saver) -> None:
        buyer, listing = saver
        db.add(WishlistItem(user_id=buyer.id, property_id=listing.id))
        db.commit()

        db.add(WishlistItem(user_id=buyer.id, property_id=listing.id))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
