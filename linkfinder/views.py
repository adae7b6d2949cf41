"""Django views for the linkfinder app.

These views render the analysis page, run the ranking engine on the
submitted article and URLs, and let the user exclude keywords or reset the
session. Inputs and exclusions live in the session so a keyword toggle can
re-run the analysis without re-submitting the article.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from asgiref.sync import async_to_sync
from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from .engine.analyzer import AnalysisInProgress, AnalysisInputError
from .engine.scoring import get_score_category
from .engine.types import AnalysisResult
from .forms import AnalysisForm, KeywordToggleForm
from .services import get_analyzer

SESSION_ARTICLE = 'linkfinder:article'
SESSION_URLS = 'linkfinder:urls'
SESSION_MODE = 'linkfinder:mode'
SESSION_EXCLUDED = 'linkfinder:excluded'

SEMANTIC_BADGE_THRESHOLD = 50


def _run_analysis(
    request: HttpRequest,
    article_text: str,
    url_list: List[str],
    mode: str,
    excluded: List[str],
    *,
    announce: bool = True,
) -> Optional[AnalysisResult]:
    """Run the analyzer and report its notices through the messages framework."""

    analyzer = get_analyzer()
    try:
        outcome = async_to_sync(analyzer.analyze)(article_text, url_list, mode, excluded)
    except AnalysisInProgress:
        messages.warning(request, 'An analysis is already running. Please wait for it to finish.')
        return None
    except AnalysisInputError as exc:
        messages.error(request, str(exc))
        return None

    if outcome.notice:
        messages.error(request, outcome.notice)
    elif announce:
        messages.success(request, 'Semantic & keyword analysis finished.')
    return outcome.result


def _results_context(result: Optional[AnalysisResult], excluded: List[str]) -> Dict[str, Any]:
    if result is None:
        return {'result': None, 'rows': [], 'keyword_cloud': [], 'excluded': excluded}

    config = get_analyzer().config
    excluded_set = set(excluded)
    rows = [
        {
            'opportunity': item,
            'category': get_score_category(item.score, config),
            'keywords': [keyword for keyword in item.matched_keywords if keyword not in excluded_set][:5],
            'is_semantic': (item.semantic_score or 0) > SEMANTIC_BADGE_THRESHOLD,
        }
        for item in result.opportunities
    ]
    keyword_cloud = sorted(set(result.article_keywords) | excluded_set) if result.article_keywords else []
    return {
        'result': result,
        'rows': rows,
        'keyword_cloud': keyword_cloud,
        'excluded': excluded,
    }


def _stored_form(request: HttpRequest) -> AnalysisForm:
    return AnalysisForm(
        initial={
            'content': request.session.get(SESSION_ARTICLE, ''),
            'urls': '\n'.join(request.session.get(SESSION_URLS, [])),
            'mode': request.session.get(SESSION_MODE, 'batch'),
        }
    )


def analyze(request: HttpRequest) -> HttpResponse:
    """Display the analysis form and rank the submitted URLs."""

    excluded: List[str] = list(request.session.get(SESSION_EXCLUDED, []))
    result: Optional[AnalysisResult] = None

    if request.method == 'POST':
        form = AnalysisForm(request.POST, request.FILES)
        if form.is_valid():
            article_text: str = form.cleaned_data['article_text']
            url_list: List[str] = form.cleaned_data['url_list']
            mode: str = form.cleaned_data['mode']
            request.session[SESSION_ARTICLE] = article_text
            request.session[SESSION_URLS] = url_list
            request.session[SESSION_MODE] = mode
            result = _run_analysis(request, article_text, url_list, mode, excluded)
    else:
        form = _stored_form(request)

    context = {'form': form, 'toggle_form': KeywordToggleForm()}
    context.update(_results_context(result, excluded))
    return render(request, 'linkfinder/analyze.html', context)


@require_POST
def toggle_keyword(request: HttpRequest) -> HttpResponse:
    """Exclude or restore a keyword, then re-run the stored analysis."""

    form = KeywordToggleForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Choose a keyword to toggle.')
        return redirect('linkfinder:analyze')

    keyword: str = form.cleaned_data['keyword']
    excluded: List[str] = list(request.session.get(SESSION_EXCLUDED, []))
    if keyword in excluded:
        excluded.remove(keyword)
    else:
        excluded.append(keyword)
    request.session[SESSION_EXCLUDED] = excluded

    article_text = request.session.get(SESSION_ARTICLE, '')
    url_list = request.session.get(SESSION_URLS, [])
    if not article_text or not url_list:
        messages.info(request, 'Run an analysis before excluding keywords.')
        return redirect('linkfinder:analyze')

    mode = request.session.get(SESSION_MODE, 'batch')
    result = _run_analysis(request, article_text, url_list, mode, excluded, announce=False)

    context = {'form': _stored_form(request), 'toggle_form': KeywordToggleForm()}
    context.update(_results_context(result, excluded))
    return render(request, 'linkfinder/analyze.html', context)


@require_POST
def reset(request: HttpRequest) -> HttpResponse:
    """Clear the stored inputs, exclusions and cached embeddings."""

    for key in (SESSION_ARTICLE, SESSION_URLS, SESSION_MODE, SESSION_EXCLUDED):
        request.session.pop(key, None)
    get_analyzer().reset()
    return redirect('linkfinder:analyze')
