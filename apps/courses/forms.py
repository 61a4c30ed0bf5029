from django import forms


class CourseCreateForm(forms.Form):
    course_code = forms.CharField(
        label="Course code",
        max_length=20,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "Course Code (e.g., CS101)"}),
    )
    course_name = forms.CharField(
        label="Course name",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "Course Name"}),
    )
    department = forms.CharField(
        label="Department",
        max_length=100,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "Department"}),
    )
    instructor_name = forms.CharField(
        label="Instructor",
        max_length=100,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "Instructor Name"}),
    )
    credits = forms.IntegerField(
        label="Credits",
        min_value=0,
        widget=forms.NumberInput(attrs={"class": "input", "placeholder": "Credits"}),
    )
    capacity = forms.IntegerField(
        label="Capacity",
        min_value=0,
        widget=forms.NumberInput(attrs={"class": "input", "placeholder": "Capacity"}),
    )
    description = forms.CharField(
        label="Description",
        required=False,
        widget=forms.Textarea(attrs={"class": "input", "rows": 3, "placeholder": "Course Description"}),
    )

    def to_payload(self) -> dict:
        data = self.cleaned_data
        # New courses always start empty; the backend maintains the count afterwards.
        return {
            "courseCode": data["course_code"].strip(),
            "courseName": data["course_name"].strip(),
            "description": data.get("description", "").strip(),
            "credits": data["credits"],
            "department": data["department"].strip(),
            "instructorName": data["instructor_name"].strip(),
            "capacity": data["capacity"],
            "enrolled": 0,
        }
