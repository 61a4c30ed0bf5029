from django import forms


STATUS_CHOICES = [
    ("ACTIVE", "Active"),
    ("INACTIVE", "Inactive"),
]


class StudentCreateForm(forms.Form):
    first_name = forms.CharField(
        label="First name",
        max_length=100,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "First Name"}),
    )
    last_name = forms.CharField(
        label="Last name",
        max_length=100,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "Last Name"}),
    )
    email = forms.EmailField(
        label="Email",
        widget=forms.EmailInput(attrs={"class": "input", "placeholder": "Email"}),
    )
    phone_number = forms.CharField(
        label="Phone",
        max_length=20,
        widget=forms.TextInput(attrs={"class": "input", "placeholder": "Phone Number"}),
    )
    status = forms.ChoiceField(label="Status", choices=STATUS_CHOICES, initial="ACTIVE")
    date_of_birth = forms.DateField(
        label="Date of birth",
        required=False,
        widget=forms.DateInput(attrs={"type": "date", "class": "input"}),
    )
    address = forms.CharField(
        label="Address",
        required=False,
        max_length=255,
        widget=forms.Textarea(attrs={"class": "input", "rows": 2, "placeholder": "Address"}),
    )

    def to_payload(self) -> dict:
        data = self.cleaned_data
        date_of_birth = data.get("date_of_birth")
        return {
            "firstName": data["first_name"].strip(),
            "lastName": data["last_name"].strip(),
            "email": data["email"],
            "phoneNumber": data["phone_number"].strip(),
            "status": data["status"],
            "dateOfBirth": date_of_birth.isoformat() if date_of_birth else None,
            "address": data.get("address", "").strip(),
        }
