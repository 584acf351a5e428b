"""Live contract tests for POST /api/v1/Authors."""

import pytest

from bookstore import factories
from bookstore.domain.models import Author
from bookstore.validation import response_validator as rv

pytestmark = pytest.mark.live_api


class TestAuthorsPost:
    def test_create_author_valid_data_success(self, test_context):
        """Verify creating a new author with valid data succeeds"""
        new_author = factories.author_for_creation()

        response = test_context.authors.create(new_author)

        rv.validate_status_code(response, 200)
        rv.validate_json_content_type(response)
        rv.validate_response_time(response, 5000)

        created = test_context.authors.parse(response)
        assert created.id is not None
        assert created.first_name == new_author.first_name
        assert created.last_name == new_author.last_name
        assert created.id_book == new_author.id_book
        test_context.info(f"Successfully created author: {created.full_name}")

    def test_create_author_minimal_data_success(self, test_context):
        """Verify creating author with minimal required data"""
        minimal = Author.with_book_id(f"Min{test_context.timestamp()}", "Author", 1)

        response = test_context.authors.create(minimal)

        rv.validate_status_code(response, 200)
        created = test_context.authors.parse(response)
        assert created.id is not None
        assert created.first_name == minimal.first_name
        assert created.last_name == minimal.last_name
        test_context.info(f"Successfully created minimal author: {created.full_name}")

    def test_create_author_empty_first_name_returns_error(self, test_context):
        """Verify creating author with empty first name returns error"""
        response = test_context.authors.create(Author.with_book_id("", "TestAuthor", 1))

        rv.validate_bad_request(response)
        rv.validate_response_time(response, 3000)

    def test_create_author_empty_last_name_returns_error(self, test_context):
        """Verify creating author with empty last name returns error"""
        response = test_context.authors.create(Author.with_book_id("TestAuthor", "", 1))

        rv.validate_bad_request(response)
        rv.validate_response_time(response, 3000)

    def test_create_author_absent_book_id_returns_error(self, test_context):
        """Verify creating author with null book ID returns error"""
        response = test_context.authors.create(
            Author.with_book_id("TestAuthor", "WithNullBook", None)
        )

        rv.validate_bad_request(response)
        rv.validate_response_time(response, 3000)

    def test_create_author_negative_book_id_returns_error(self, test_context):
        """Verify creating author with negative book ID returns error"""
        response = test_context.authors.create(
            Author.with_book_id("TestAuthor", "WithNegativeBook", -1)
        )

        rv.validate_bad_request(response)
        rv.validate_response_time(response, 3000)

    def test_create_author_invalid_factory_payload_returns_error(self, test_context):
        """Verify creating author from invalid data returns error"""
        response = test_context.authors.create(factories.invalid_author())

        rv.validate_bad_request(response)
        rv.validate_response_time(response, 3000)

    def test_create_author_very_long_names(self, test_context):
        """Verify creating author with very long names"""
        long_name = "a" * 1000

        response = test_context.authors.create(Author.with_book_id(long_name, long_name, 1))

        rv.validate_status_in(response, 200, 400, 413)
        rv.validate_response_time(response, 5000)
        test_context.info(f"Received status {response.status_code} for very long names")

    def test_create_author_special_characters(self, test_context):
        """Verify creating author with special characters in names"""
        response = test_context.authors.create(
            Author.with_book_id("João-André", "O'Connor-Smith", 1)
        )

        rv.validate_status_in(response, 200, 400)
        rv.validate_response_time(response, 3000)
        test_context.info(f"Received status {response.status_code} for special characters")

    def test_create_author_non_existent_book_id(self, test_context):
        """Verify creating author with non-existent book ID"""
        author = Author.with_book_id(f"Test{test_context.timestamp()}", "Author", 999999)

        response = test_context.authors.create(author)

        rv.validate_status_in(response, 200, 400, 404)
        rv.validate_response_time(response, 3000)
        test_context.info(f"Received status {response.status_code} for non-existent book ID")
