"""
S3 document storage with a mocked boto3 client.
"""
import unittest
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from services.document_storage import S3DocumentStorage
from services.documents import DocumentAttachment
from services.errors import DocumentUploadError


class TestS3DocumentStorage(unittest.IsolatedAsyncioTestCase):
    async def test_upload_puts_object_and_returns_url(self):
        client = MagicMock()
        storage = S3DocumentStorage("loan-cases", client=client, public_url="https://cdn.example.com/")
        attachment = DocumentAttachment("Bank Statement", "March.PDF", b"%PDF-1.4", "application/pdf")

        url = await storage.upload("LC-001", "Bank Statement", attachment)

        kwargs = client.put_object.call_args.kwargs
        self.assertEqual(kwargs["Bucket"], "loan-cases")
        self.assertEqual(kwargs["Body"], b"%PDF-1.4")
        self.assertEqual(kwargs["ContentType"], "application/pdf")
        self.assertRegex(kwargs["Key"], r"^case-documents/LC-001/bank-statement-[0-9a-f]{8}\.pdf$")
        self.assertEqual(url, f"https://cdn.example.com/{kwargs['Key']}")

    async def test_client_error_becomes_upload_error(self):
        client = MagicMock()
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        storage = S3DocumentStorage("loan-cases", client=client)
        with self.assertRaises(DocumentUploadError):
            await storage.upload("LC-001", "Pan Card", DocumentAttachment("Pan Card", "pan.jpg", b"x"))


class TestUrls(unittest.TestCase):
    def test_url_fallbacks(self):
        client = MagicMock()
        self.assertEqual(
            S3DocumentStorage("b", client=client, endpoint="http://minio:9000").url_for("k"),
            "http://minio:9000/b/k",
        )
        self.assertEqual(
            S3DocumentStorage("b", client=client, region="ap-south-1").url_for("k"),
            "https://b.s3.ap-south-1.amazonaws.com/k",
        )


if __name__ == "__main__":
    unittest.main()
