"""Live contract tests for POST /api/v1/Books."""

from datetime import UTC, datetime

import pytest

from bookstore import factories
from bookstore.domain.models import Book
from bookstore.validation import response_validator as rv

pytestmark = pytest.mark.live_api


class TestBooksPost:
    def test_create_book_valid_data_success(self, test_context):
        """Verify creating a new book with valid data succeeds"""
        new_book = factories.book_for_creation()

        response = test_context.books.create(new_book)

        rv.validate_status_code(response, 200)
        rv.validate_response_time(response, 5000)
        test_context.info(f"Successfully created book: {new_book.title}")

    def test_create_book_complete_data_success(self, test_context):
        """Verify creating a book with complete data structure"""
        complete_book = Book(
            title=f"Complete Test Book {test_context.timestamp()}",
            description="This is a comprehensive test book with all fields populated",
            page_count=350,
            excerpt="This excerpt demonstrates complete book data structure...",
            publish_date=datetime.now(UTC),
        )

        response = test_context.books.create(complete_book)

        rv.validate_status_code(response, 200)
        rv.validate_response_time(response, 5000)
        rv.validate_json_field_value(response, "title", complete_book.title)
        test_context.info(f"Successfully created complete book: {complete_book.title}")

    def test_create_book_minimal_data_success(self, test_context):
        """Verify creating a book with minimal required data"""
        minimal_book = Book(
            title=f"Minimal Book {test_context.timestamp()}",
            description="Minimal description",
            page_count=1,
            excerpt="Minimal excerpt",
            publish_date=datetime.now(UTC),
        )

        response = test_context.books.create(minimal_book)

        rv.validate_status_code(response, 200)
        rv.validate_response_time(response, 5000)
        test_context.info(f"Successfully created minimal book: {minimal_book.title}")

    def test_create_book_absent_title_returns_error(self, test_context):
        """Verify creating book with null title returns appropriate error"""
        book = Book(
            description="Book with null title",
            page_count=100,
            excerpt="Test excerpt",
            publish_date=datetime.now(UTC),
        )

        response = test_context.books.create(book)

        rv.validate_status_in(response, 200, 400, 422)
        rv.validate_response_time(response, 5000)
        test_context.info(f"Received status {response.status_code} for null title")

    def test_create_book_empty_title_appropriate_behavior(self, test_context):
        """Verify creating book with empty title"""
        book = Book(
            title="",
            description="Book with empty title",
            page_count=100,
            excerpt="Test excerpt",
            publish_date=datetime.now(UTC),
        )

        response = test_context.books.create(book)

        rv.validate_response_time(response, 5000)
        test_context.info(f"API returned status {response.status_code} for empty title")

    def test_create_book_negative_page_count_appropriate_behavior(self, test_context):
        """Verify creating book with negative page count"""
        book = Book(
            title=f"Book with Negative Pages {test_context.timestamp()}",
            description="Testing negative page count validation",
            page_count=-50,
            excerpt="Test excerpt",
            publish_date=datetime.now(UTC),
        )

        response = test_context.books.create(book)

        rv.validate_response_time(response, 5000)
        test_context.info(f"API returned status {response.status_code} for negative page count")

    def test_create_book_large_data_appropriate_behavior(self, test_context):
        """Verify creating book with extremely large data"""
        book = Book(
            title="Very Long Title " * 100,
            description="Very long description content " * 1000,
            page_count=999999,
            excerpt="Standard excerpt",
            publish_date=datetime.now(UTC),
        )

        response = test_context.books.create(book)

        rv.validate_response_time(response, 10000)
        test_context.info(f"API returned status {response.status_code} for large data")

    def test_create_book_invalid_factory_payload_rejected(self, test_context):
        """Verify creating a book from invalid data returns 400"""
        response = test_context.books.create(factories.invalid_book())

        rv.validate_bad_request(response)
        rv.validate_response_time(response, 5000)

    def test_create_book_invalid_data_types_rejected(self, test_context):
        """Verify creating a book with wrongly typed fields returns 400"""
        payload = (
            '{"title": "Valid Title", "pageCount": "not_a_number", '
            '"publishDate": "invalid_date_format"}'
        )

        response = test_context.books.create(payload)

        rv.validate_bad_request(response)
        rv.validate_response_time(response, 5000)

    def test_create_multiple_books_in_sequence(self, test_context):
        """Verify creating multiple books in sequence"""
        number_of_books = 3
        for i in range(1, number_of_books + 1):
            book = factories.book_with_title(f"Sequential Book {i} {test_context.timestamp()}")
            test_context.step(f"Create book {i}", book.title)

            response = test_context.books.create(book)

            rv.validate_status_code(response, 200)
            rv.validate_response_time(response, 5000)

        test_context.info(f"Successfully created {number_of_books} books in sequence")
