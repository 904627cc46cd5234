import factory
from faker import Faker
from datetime import datetime, timedelta, timezone

from spectapps.models.video import VideoHistory
from spectapps.services.video_generation.base_provider import RemoteJobSnapshot, RemoteJobStatus

fake = Faker()

BASE_TIME = datetime(2025, 7, 27, 12, 0, tzinfo=timezone.utc)


class VideoHistoryFactory(factory.Factory):
    """Factory for creating VideoHistory rows, one minute apart."""

    class Meta:
        model = VideoHistory

    prompt = factory.LazyFunction(lambda: fake.sentence(nb_words=6))
    video_url = factory.LazyFunction(lambda: f"https://replicate.delivery/{fake.uuid4()}/output.mp4")
    created_at = factory.Sequence(lambda n: BASE_TIME + timedelta(minutes=n))


class RemoteJobSnapshotFactory(factory.Factory):
    """Factory for prediction snapshots as returned by a job client."""

    class Meta:
        model = RemoteJobSnapshot

    id = "job-123"
    status = RemoteJobStatus.STARTING
    output = None
    error = None
