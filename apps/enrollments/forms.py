from django import forms

from .services import course_options, student_choices


STATUS_CHOICES = [
    ("ENROLLED", "Enrolled"),
    ("COMPLETED", "Completed"),
    ("DROPPED", "Dropped"),
]


class SeatSelect(forms.Select):
    """Select that renders courses without free seats as disabled options."""

    def __init__(self, *args, full_values=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.full_values = {str(value) for value in full_values}

    def create_option(self, name, value, label, selected, index, subindex=None, attrs=None):
        option = super().create_option(name, value, label, selected, index, subindex=subindex, attrs=attrs)
        if str(value) in self.full_values:
            option["attrs"]["disabled"] = True
        return option


class EnrollForm(forms.Form):
    student = forms.TypedChoiceField(label="Select Student", coerce=int, choices=[])
    course = forms.TypedChoiceField(label="Select Course", coerce=int, choices=[], widget=SeatSelect)

    def __init__(self, *args, students=(), courses=(), **kwargs):
        super().__init__(*args, **kwargs)

        self.fields["student"].choices = [("", "-- Choose Student --")] + student_choices(list(students))

        options = course_options(list(courses))
        self.fields["course"].widget.full_values = {o.value for o in options if o.full}
        self.fields["course"].choices = [("", "-- Choose Course --")] + [(o.value, o.label) for o in options]


class EnrollmentUpdateForm(forms.Form):
    status = forms.ChoiceField(label="Status", choices=STATUS_CHOICES)
    grade = forms.CharField(
        label="Grade",
        required=False,
        max_length=5,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "e.g. A-"}),
    )

    def apply_to(self, enrollment: dict) -> dict:
        grade = self.cleaned_data.get("grade", "").strip()
        return {
            **enrollment,
            "status": self.cleaned_data["status"],
            "grade": grade or None,
        }
