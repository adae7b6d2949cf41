"""Forms for the linkfinder app.

The forms define user-facing inputs for pasting an article, supplying
candidate URLs (pasted or uploaded from a sitemap) and toggling excluded
keywords. Validation rejects a request before any analysis starts.
"""

from __future__ import annotations

from django import forms

from .services import html_to_text, normalize_urls, read_uploaded_sitemap

MODE_CHOICES = (
    ('batch', 'Batch (top results, best first)'),
    ('individual', 'Individual (every match, URL order)'),
)


class AnalysisForm(forms.Form):
    """Form used to analyze an article against a list of candidate URLs."""

    content = forms.CharField(
        required=False,
        strip=False,
        widget=forms.Textarea(
            attrs={
                'rows': 18,
                'placeholder': (
                    'Paste your article content here. The tool will analyze the text to identify '
                    'keyword themes and match them against your sitemap URLs...'
                ),
            }
        ),
        label='Article content',
    )
    is_html_input = forms.BooleanField(
        required=False,
        label='Content is HTML',
        help_text='Check if your content is HTML markup rather than plain text.',
    )
    urls = forms.CharField(
        required=False,
        widget=forms.Textarea(
            attrs={
                'rows': 6,
                'placeholder': '/blog/best-content-writing-tools\n/seo/how-to-use-canonical-tags',
            }
        ),
        label='Sitemap URLs',
        help_text='One URL per line. Commas and spaces also separate entries.',
    )
    file = forms.FileField(
        required=False,
        label='Upload sitemap file',
        help_text='Upload an XML, XML.GZ or plain text list of URLs.',
    )
    mode = forms.ChoiceField(
        choices=MODE_CHOICES,
        initial='batch',
        label='Mode',
    )

    def clean(self) -> dict[str, object]:  # type: ignore[override]
        cleaned_data = super().clean()
        content = cleaned_data.get('content') or ''
        if cleaned_data.get('is_html_input'):
            content = html_to_text(content)
        if not content.strip():
            raise forms.ValidationError('Please paste your article content first')
        cleaned_data['article_text'] = content

        raw_urls = cleaned_data.get('urls') or ''
        file_obj = cleaned_data.get('file')
        if file_obj:
            raw_urls = '\n'.join(part for part in (raw_urls, read_uploaded_sitemap(file_obj)) if part)
        url_list = normalize_urls(raw_urls)
        if not url_list:
            raise forms.ValidationError('Please add sitemap URLs to analyze')
        cleaned_data['url_list'] = url_list
        return cleaned_data


class KeywordToggleForm(forms.Form):
    """Single keyword to exclude from, or restore to, the analysis."""

    keyword = forms.CharField(max_length=200)

    def clean_keyword(self) -> str:
        keyword = ' '.join(self.cleaned_data['keyword'].lower().split())
        if not keyword:
            raise forms.ValidationError('Keyword cannot be blank.')
        return keyword
