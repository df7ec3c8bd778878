"""JavaScript helper functions for the dashboard.

Formatting, escaping and the fetch/post wrappers used by the core script.
"""

JS_UTILS = """
        const FETCH_TIMEOUT_MS = 15000;

        async function fetchWithTimeout(url, options = {}) {
            const controller = new AbortController();
            const timeout = setTimeout(() => controller.abort(), FETCH_TIMEOUT_MS);
            try {
                return await fetch(url, { ...options, signal: controller.signal });
            } finally {
                clearTimeout(timeout);
            }
        }

        async function postJson(url, payload) {
            const response = await fetchWithTimeout(url, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(payload),
            });
            if (!response.ok) throw new Error('Request to ' + url + ' failed');
            return response.json();
        }

        function escapeHtml(text) {
            if (text === null || text === undefined) return '';
            return String(text)
                .replace(/&/g, '&amp;')
                .replace(/</g, '&lt;')
                .replace(/>/g, '&gt;')
                .replace(/"/g, '&quot;')
                .replace(/'/g, '&#39;');
        }

        function capitalize(text) {
            return text ? text.charAt(0).toUpperCase() + text.slice(1) : '';
        }

        function formatTrend(trend) {
            // Leading sign picks the arrow; the magnitude is shown without it
            const magnitude = escapeHtml(trend.substring(1));
            return trend.startsWith('+')
                ? `<span class="arrow-up">&#8593; ${magnitude}</span>`
                : `<span class="arrow-down">&#8595; ${magnitude}</span>`;
        }

        function formatHealthTrend(value) {
            return value > 0
                ? `<span class="trend up">&#8593; +${value}%</span>`
                : `<span class="trend down">&#8595; ${value}%</span>`;
        }

        function formatTime(date) {
            return date.toLocaleTimeString(navigator.language);
        }
"""
