"""JavaScript core functionality for the dashboard.

Renders the sidebar and the overview, facility and panel views from the
/overview payload, and posts user actions back to the server.
"""

JS_CORE = """
        let isUpdating = false;
        let searchTimer = null;

        function renderSidebar(data) {
            const overview = document.getElementById('overviewLink');
            overview.classList.toggle('active', data.view === 'overview');

            const pinnedSection = document.getElementById('pinnedSection');
            pinnedSection.hidden = data.pinned.length === 0;
            document.getElementById('pinnedList').innerHTML = data.pinned.map(p => `
                <div class="pinned-item${data.state.facility_id === p.facility_id && data.state.panel_id === p.panel_id ? ' active' : ''}"
                     data-action="select-panel" data-facility="${escapeHtml(p.facility_id)}" data-panel="${escapeHtml(p.panel_id)}">
                    <span class="dot ${p.severity}"></span>
                    <span>${escapeHtml(p.code)} - ${escapeHtml(p.name)}</span>
                </div>
            `).join('');

            document.getElementById('facilityTree').innerHTML = data.sidebar.map(f => `
                <div class="tree-node">
                    <div class="tree-facility" data-action="expand" data-facility="${escapeHtml(f.id)}">
                        <span data-action="select-facility" data-facility="${escapeHtml(f.id)}">${escapeHtml(f.name)}</span>
                        <span>${f.expanded ? '&#9662;' : '&#9656;'}</span>
                    </div>
                    <div class="tree-panels"${f.expanded ? '' : ' hidden'}>
                        ${f.panels.map(p => `
                            <div class="tree-panel${p.selected ? ' active' : ''}"
                                 data-action="select-panel" data-facility="${escapeHtml(f.id)}" data-panel="${escapeHtml(p.id)}">
                                <span class="dot ${p.severity}"></span>
                                <span>${escapeHtml(p.code)}</span>
                                <button class="pin-button${p.pinned ? ' pinned' : ''}" title="${p.pinned ? 'Unpin' : 'Pin'}"
                                        data-action="pin" data-facility="${escapeHtml(f.id)}" data-panel="${escapeHtml(p.id)}">&#128204;</button>
                            </div>
                        `).join('')}
                    </div>
                </div>
            `).join('');
        }

        function renderFacilityCard(card) {
            const s = card.summary;
            const width = n => (n / s.total * 100) + '%';
            return `
                <div class="card clickable" data-action="select-facility" data-facility="${escapeHtml(card.id)}">
                    <h4>${escapeHtml(card.name)}</h4>
                    <p class="rating">${escapeHtml(card.location)}</p>
                    <div>
                        <span class="score ${s.color}">${s.health_score}%</span>
                        <span class="rating">${s.rating}</span>
                        ${formatHealthTrend(card.trend)}
                    </div>
                    <div class="bar">
                        <div class="critical" style="width:${width(s.counts.critical)}"></div>
                        <div class="warning" style="width:${width(s.counts.warning)}"></div>
                        <div class="normal" style="width:${width(s.counts.normal)}"></div>
                    </div>
                    <span class="rating">${card.panel_count} panel${card.panel_count !== 1 ? 's' : ''}</span>
                </div>
            `;
        }

        function renderInsight(insight) {
            const clickable = insight.panel_id ? ' clickable' : '';
            const counts = insight.counts ? `
                <div class="counts">
                    <div><strong>${insight.counts.ok}</strong>OK</div>
                    <div><strong>${insight.counts.warning}</strong>Warning</div>
                    <div><strong>${insight.counts.critical}</strong>Critical</div>
                </div>` : '';
            const affected = insight.critical_facilities ? [
                ...insight.critical_facilities.map(n => `<span class="badge">${escapeHtml(n)} &middot; Critical</span>`),
                ...insight.warning_facilities.map(n => `<span class="badge">${escapeHtml(n)} &middot; Warning</span>`),
            ].join('') : '';
            const metric = insight.metric ? `
                <div class="badges">
                    <span class="badge">${escapeHtml(insight.metric.facility_name)} &middot; ${escapeHtml(insight.metric.panel_name)}</span>
                    <span class="badge">${capitalize(insight.metric.metric)}: ${insight.metric.value}${escapeHtml(insight.metric.unit)}</span>
                    <span class="badge">${formatTrend(insight.metric.trend)}</span>
                </div>` : '';
            return `
                <div class="card insight ${insight.type}${clickable}" data-action="activate" data-insight="${escapeHtml(insight.id)}">
                    <h4>${escapeHtml(insight.title)}</h4>
                    <p>${escapeHtml(insight.description)}</p>
                    <div class="badges">
                        <span class="badge">${capitalize(insight.type)}</span>
                        <span class="badge">${escapeHtml(insight.impact)} impact</span>
                        ${insight.confidence ? `<span class="badge">${insight.confidence}% confidence</span>` : ''}
                        <span class="badge">${escapeHtml(insight.timeframe)}</span>
                        ${affected}
                    </div>
                    ${metric}
                    ${counts}
                    <div class="recommendation">${escapeHtml(insight.recommendation)}</div>
                </div>
            `;
        }

        function renderOverview(data) {
            return `
                <h3 class="section-title">Facility Health Scores</h3>
                <div class="grid">${data.cards.map(renderFacilityCard).join('')}</div>
                <h3 class="section-title">AI Alerts</h3>
                <div class="insights">${data.insights.map(renderInsight).join('')}</div>
            `;
        }

        function renderFacility(facility) {
            const s = facility.summary;
            const rows = facility.panels.map(p => `
                <tr data-action="select-panel" data-facility="${escapeHtml(facility.id)}" data-panel="${escapeHtml(p.id)}">
                    <td><span class="dot ${p.severity}"></span> ${escapeHtml(p.code)} - ${escapeHtml(p.name)}</td>
                    ${Object.values(p.metrics).map(m => `<td><span class="dot ${m.color}"></span> ${m.value}${escapeHtml(m.unit)}</td>`).join('')}
                </tr>
            `).join('');
            return `
                <div class="card">
                    <h2>${escapeHtml(facility.name)}</h2>
                    <p class="rating">${escapeHtml(facility.location)} &middot; ${escapeHtml(facility.status)}</p>
                    <div class="counts">
                        <div><strong>${s.counts.normal}</strong>Normal (${s.percentages.normal}%)</div>
                        <div><strong>${s.counts.warning}</strong>Warning (${s.percentages.warning}%)</div>
                        <div><strong>${s.counts.critical}</strong>Critical (${s.percentages.critical}%)</div>
                    </div>
                </div>
                <h3 class="section-title">Control Panels</h3>
                <table class="mini">
                    <thead><tr><th>Panel</th><th>Temp</th><th>Humidity</th><th>Current</th><th>Voltage</th><th>Vibration</th><th>Smoke</th></tr></thead>
                    <tbody>${rows}</tbody>
                </table>
                <p class="empty">Select a control panel to view details</p>
            `;
        }

        function renderPanel(facility, panel) {
            const cards = Object.entries(panel.metrics).map(([kind, m]) => `
                <div class="card metric-card ${m.status}">
                    <div class="label"><span class="dot ${m.color}"></span> ${kind}</div>
                    <div class="value">${m.value}${escapeHtml(m.unit)}</div>
                    <div>${formatTrend(m.trend)}</div>
                </div>
            `).join('');
            const badge = panel.severity === 'normal' ? '' : `<span class="badge">${capitalize(panel.severity)}</span>`;
            return `
                <div class="page-header">
                    <div>
                        <h2>${escapeHtml(panel.code)} - ${escapeHtml(panel.name)} ${badge}</h2>
                        <p class="rating">${escapeHtml(facility.name)} &middot; ${escapeHtml(facility.location)}</p>
                    </div>
                    <button class="badge" data-action="pin" data-facility="${escapeHtml(facility.id)}" data-panel="${escapeHtml(panel.id)}">
                        ${panel.pinned ? 'Unpin' : 'Pin'}
                    </button>
                </div>
                <div class="grid">${cards}</div>
            `;
        }

        function renderDashboard(data) {
            renderSidebar(data);
            const main = document.getElementById('mainView');
            if (data.view === 'overview') {
                main.innerHTML = renderOverview(data);
            } else if (data.view === 'facility') {
                main.innerHTML = renderFacility(data.facility);
            } else if (data.view === 'panel') {
                main.innerHTML = renderPanel(data.facility, data.panel);
            } else {
                main.innerHTML = '<p class="empty">Select a control panel to view details</p>';
            }
            document.getElementById('updatedTime').textContent = formatTime(new Date());
        }

        async function fetchOverview() {
            if (isUpdating) return;
            isUpdating = true;
            try {
                const response = await fetchWithTimeout('/overview');
                if (!response.ok) throw new Error('Failed to fetch overview');
                renderDashboard(await response.json());
            } catch (error) {
                console.error('Error fetching overview:', error);
            } finally {
                isUpdating = false;
            }
        }

        async function handleAction(target) {
            const action = target.dataset.action;
            const facilityId = target.dataset.facility;
            const panelId = target.dataset.panel;
            if (action === 'select-facility') {
                await postJson('/select', { facility_id: facilityId });
            } else if (action === 'select-panel') {
                await postJson('/select', { facility_id: facilityId, panel_id: panelId });
            } else if (action === 'pin') {
                await postJson('/pins', { facility_id: facilityId, panel_id: panelId });
            } else if (action === 'expand') {
                await postJson('/expand', { facility_id: facilityId });
            } else if (action === 'activate') {
                await postJson('/insights/' + encodeURIComponent(target.dataset.insight) + '/activate', {});
            } else {
                return;
            }
            if (window.innerWidth < 768 && action.startsWith('select')) {
                document.getElementById('sidebar').classList.add('collapsed');
            }
            await fetchOverview();
        }

        document.addEventListener('click', event => {
            const target = event.target.closest('[data-action]');
            if (!target) return;
            event.stopPropagation();
            handleAction(target).catch(error => console.error(error));
        });

        document.getElementById('overviewLink').addEventListener('click', () => {
            postJson('/select', { facility_id: '' }).then(fetchOverview).catch(error => console.error(error));
        });

        document.getElementById('sidebarToggle').addEventListener('click', () => {
            document.getElementById('sidebar').classList.toggle('collapsed');
        });

        document.getElementById('searchInput').addEventListener('input', event => {
            clearTimeout(searchTimer);
            searchTimer = setTimeout(() => {
                postJson('/search', { query: event.target.value }).then(fetchOverview).catch(error => console.error(error));
            }, 200);
        });

        if (window.innerWidth < 768) {
            document.getElementById('sidebar').classList.add('collapsed');
        }

        fetchOverview();
        setInterval(() => {
            if (!document.hidden) fetchOverview();
        }, REFRESH_INTERVAL);
"""
