from django.core.management.base import BaseCommand

from ClassroomApp.courses.models import Course
from ClassroomApp.domain.services import grade_summary
from ClassroomApp.learning.models import Submission

class Command(BaseCommand):
    help = "Print average grade and completion rate per course."

    def add_arguments(self, parser):
        parser.add_argument("--course", type=int, help="Only report this course id.")

    def handle(self, *args, **options):
        courses = Course.objects.order_by("id")
        if options.get("course"):
            courses = courses.filter(pk=options["course"])
        for course in courses:
            subs = list(Submission.objects.filter(assignment__course=course).only("grade"))
            summary = grade_summary.summarize(subs)
            self.stdout.write(
                f"{course.pk}\t{course.title}\t"
                f"avg={summary['average_grade']:.1f}\t"
                f"graded={summary['graded_count']}/{summary['total_count']}\t"
                f"completion={summary['completion_rate']:.0f}%"
            )
        self.stdout.write(self.style.SUCCESS(f"Reported {courses.count()} courses"))
